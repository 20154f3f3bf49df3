import pytest

from microjathon.errors import MissingLiteralEntry
from microjathon.parser import parse_program
from microjathon.planner import LabelAllocator, StoragePlan, plan_storage


def plan(source: str) -> StoragePlan:
    return plan_storage(parse_program(source), LabelAllocator())


def test_every_assigned_variable_gets_one_slot():
    p = plan('a = 1; b = 2; a = a + b;')
    assert p.slots == {'a': 'var_a', 'b': 'var_b'}
    assert p.string_vars == set()


def test_string_literal_assignment_is_pooled():
    p = plan('s = "hi"; n = 3;')
    assert p.is_string('s')
    assert not p.is_string('n')
    assert [(e.label, e.text) for e in p.pool] == [('str0', 'hi')]
    assert p.literal_label('s', 'hi') == 'str0'


def test_identical_literals_share_an_entry():
    p = plan('a = "x"; b = "x"; c = "y";')
    assert [e.text for e in p.pool] == ['x', 'y']
    assert p.literal_label('a', 'x') == p.literal_label('b', 'x')


def test_assignments_inside_loops_are_planned_before_use():
    p = plan('i = 0; while (i < 2) { if (i == 1) { print(msg); } msg = "later"; i = i + 1; }')
    assert p.is_string('msg')
    assert list(p.slots) == ['i', 'msg']


def test_names_only_read_get_a_numeric_slot():
    p = plan('print(ghost + 1);')
    assert p.slots == {'ghost': 'var_ghost'}
    assert not p.is_string('ghost')


def test_printed_literals_are_not_pooled():
    assert plan('print("inline");').pool == []


def test_missing_literal_entry_is_a_defect():
    p = plan('s = "hi"; n = 1;')
    with pytest.raises(MissingLiteralEntry):
        p.literal_label('n', 'hi')
    with pytest.raises(MissingLiteralEntry):
        p.literal_label('s', 'bye')


def test_label_allocator_never_repeats():
    labels = LabelAllocator()
    made = [labels.fresh('L'), labels.fresh('str'), labels.fresh('L')]
    assert made == ['L0', 'str1', 'L2']
    assert labels.allocated == made
