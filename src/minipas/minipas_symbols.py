"""
Symbol records and the scoped symbol table built by the parser.

Classes:
    VariableKind: Local variable (0) or parameter (1), as written to the variable ledger.
    Variable: A declared variable or parameter with its storage address.
    Procedure: A declared function with the address range of its own variables.
    SymbolTable: Declaration bookkeeping, duplicate detection and lexical lookup.

Scoping rules:
    - A variable or parameter is unique per (owning procedure, kind, level)
      among the declarations made since the enclosing body was opened. A body
      that repeats an earlier procedure's name therefore gets its own scope.
    - A procedure is unique per level.
    - A variable reference at level L resolves to the most recently declared
      variable or parameter with level <= L.
    - A procedure reference at level L resolves to the most recently declared
      procedure with level <= L + 1, i.e. one visible from its own body or any
      enclosing body.

Addresses are handed out in declaration order starting at 0 and are never reset,
so every variable in a program has a distinct address.
"""

from dataclasses import dataclass
from enum import IntEnum

from minipas.minipas_constants import VALUE_TYPE


class VariableKind(IntEnum):
    LOCAL = 0
    PARAMETER = 1


@dataclass
class Variable:
    name: str
    procedure: str
    kind: VariableKind
    level: int
    address: int
    type: str = VALUE_TYPE


@dataclass
class Procedure:
    name: str
    level: int
    first_address: int = -1
    last_address: int = -1
    type: str = VALUE_TYPE

    def claim(self, address: int) -> None:
        """Extends the address range to cover a newly declared variable."""
        if self.first_address == -1:
            self.first_address = address
        self.last_address = address


class SymbolTable:
    """Variables and procedures declared so far, in declaration order.

    Attributes:
        variables (list[Variable]): Every accepted variable and parameter.
        procedures (list[Procedure]): Every accepted procedure.
        next_address (int): The address the next declared variable receives.
    """

    def __init__(self) -> None:
        self.variables: list[Variable] = []
        self.procedures: list[Procedure] = []
        self.next_address = 0

    def declare_variable(
        self, name: str, procedure: str, kind: VariableKind, level: int, since: int = 0
    ) -> Variable | None:
        """Adds a variable or parameter unless it duplicates an earlier declaration.

        Args:
            since: Index into `variables` where the current scope starts; older
                records are not considered duplicates.

        Returns:
            Variable | None: The new record, or None if `name` is already declared
            with the same owner, kind and level. Duplicates are not added.
        """
        if self.find_duplicate_variable(name, procedure, kind, level, since) is not None:
            return None
        return self.add_variable(name, procedure, kind, level)

    def add_variable(self, name: str, procedure: str, kind: VariableKind, level: int) -> Variable:
        """Adds a variable or parameter at the next free address, without checks."""
        variable = Variable(name, procedure, kind, level, self.next_address)
        self.next_address += 1
        self.variables.append(variable)
        return variable

    def declare_procedure(self, name: str, level: int) -> Procedure | None:
        """Adds a procedure whose body runs at `level`; None if it is a duplicate."""
        if self.find_duplicate_procedure(name, level) is not None:
            return None
        procedure = Procedure(name, level)
        self.procedures.append(procedure)
        return procedure

    def find_duplicate_variable(
        self, name: str, procedure: str, kind: VariableKind, level: int, since: int = 0
    ) -> Variable | None:
        for variable in self.variables[since:]:
            if (
                variable.name == name
                and variable.procedure == procedure
                and variable.kind == kind
                and variable.level == level
            ):
                return variable
        return None

    def find_duplicate_procedure(self, name: str, level: int) -> Procedure | None:
        for procedure in self.procedures:
            if procedure.name == name and procedure.level == level:
                return procedure
        return None

    def find_variable(self, name: str, level: int) -> Variable | None:
        for variable in reversed(self.variables):
            if variable.name == name and variable.level <= level:
                return variable
        return None

    def find_procedure(self, name: str, level: int) -> Procedure | None:
        for procedure in reversed(self.procedures):
            if procedure.name == name and procedure.level <= level + 1:
                return procedure
        return None


__all__ = ["Procedure", "SymbolTable", "Variable", "VariableKind"]
