from minipas.minipas_symbols import Procedure, SymbolTable, Variable, VariableKind


def test_addresses_are_sequential_across_owners() -> None:
    table = SymbolTable()
    a = table.declare_variable("a", "main", VariableKind.LOCAL, 1)
    n = table.declare_variable("n", "f", VariableKind.PARAMETER, 2)
    b = table.declare_variable("b", "f", VariableKind.LOCAL, 2)
    assert [v.address for v in (a, n, b) if v is not None] == [0, 1, 2]
    assert table.next_address == 3


def test_duplicate_variable_is_rejected() -> None:
    table = SymbolTable()
    assert table.declare_variable("a", "main", VariableKind.LOCAL, 1) is not None
    assert table.declare_variable("a", "main", VariableKind.LOCAL, 1) is None
    assert len(table.variables) == 1
    assert table.next_address == 1


def test_same_name_different_scope_is_allowed() -> None:
    table = SymbolTable()
    table.declare_variable("n", "f", VariableKind.PARAMETER, 2)
    assert table.declare_variable("n", "f", VariableKind.LOCAL, 2) is not None
    assert table.declare_variable("n", "g", VariableKind.LOCAL, 2) is not None
    assert table.declare_variable("n", "main", VariableKind.LOCAL, 1) is not None
    assert len(table.variables) == 4


def test_variable_lookup_uses_nearest_declaration() -> None:
    table = SymbolTable()
    table.declare_variable("x", "main", VariableKind.LOCAL, 1)
    table.declare_variable("x", "f", VariableKind.LOCAL, 2)

    inner = table.find_variable("x", 2)
    outer = table.find_variable("x", 1)
    assert inner is not None and inner.level == 2
    assert outer is not None and outer.level == 1
    assert table.find_variable("y", 2) is None


def test_inner_variable_not_visible_outside() -> None:
    table = SymbolTable()
    table.declare_variable("t", "f", VariableKind.LOCAL, 2)
    assert table.find_variable("t", 1) is None


def test_procedure_visible_from_own_body_and_enclosing_level() -> None:
    table = SymbolTable()
    table.declare_procedure("f", 2)
    assert table.find_procedure("f", 1) is not None
    assert table.find_procedure("f", 2) is not None

    table.declare_procedure("g", 3)
    assert table.find_procedure("g", 1) is None
    assert table.find_procedure("g", 2) is not None


def test_duplicate_procedure_per_level() -> None:
    table = SymbolTable()
    assert table.declare_procedure("f", 2) is not None
    assert table.declare_procedure("f", 2) is None
    assert table.declare_procedure("f", 3) is not None
    assert [p.level for p in table.procedures] == [2, 3]


def test_procedure_claim_tracks_address_range() -> None:
    procedure = Procedure("f", 2)
    assert (procedure.first_address, procedure.last_address) == (-1, -1)
    procedure.claim(4)
    procedure.claim(5)
    procedure.claim(6)
    assert (procedure.first_address, procedure.last_address) == (4, 6)


def test_record_defaults() -> None:
    variable = Variable("a", "main", VariableKind.LOCAL, 1, 0)
    assert variable.type == "integer"
    assert int(variable.kind) == 0
    assert int(VariableKind.PARAMETER) == 1
    assert Procedure("f", 2).type == "integer"


def test_duplicate_check_starts_at_scope() -> None:
    table = SymbolTable()
    table.declare_variable("a", "f", VariableKind.LOCAL, 2)
    since = len(table.variables)
    again = table.declare_variable("a", "f", VariableKind.LOCAL, 2, since)
    assert again is not None
    assert again.address == 1
    assert table.declare_variable("a", "f", VariableKind.LOCAL, 2, since) is None


def test_add_variable_skips_duplicate_check() -> None:
    table = SymbolTable()
    first = table.add_variable("n", "f", VariableKind.PARAMETER, 2)
    second = table.add_variable("n", "f", VariableKind.PARAMETER, 2)
    assert (first.address, second.address) == (0, 1)
    assert len(table.variables) == 2
