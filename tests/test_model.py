"""Tests for the record / group / store model and its accessor API."""

from threading import Thread

import pytest

from pyminion import IniGroup, IniRecord, IniStore


@pytest.mark.unit
class TestIniRecord:
    def test_key_is_trimmed(self) -> None:
        record = IniRecord('  key ', 'v')
        assert record.key == 'key'

    def test_needs_a_value(self) -> None:
        with pytest.raises(ValueError):
            IniRecord('key')

    @pytest.mark.parametrize('key', ['', '   '])
    def test_needs_a_key(self, key: str) -> None:
        with pytest.raises(ValueError):
            IniRecord(key, 'v')

    def test_values_keep_order(self) -> None:
        record = IniRecord('k', '3', '1', '2')
        assert record.values == ('3', '1', '2')
        assert record.value == '3'

    def test_has_value_looks_at_first_only(self) -> None:
        assert IniRecord('k', 'x').has_value()
        assert not IniRecord('k', '').has_value()
        assert not IniRecord('k', '  ', 'x').has_value()

    def test_equality(self) -> None:
        assert IniRecord('k', '1', '2') == IniRecord(' k', '1', '2')
        assert IniRecord('k', '1') != IniRecord('k', '2')


@pytest.mark.unit
class TestIniGroup:
    def test_name_is_trimmed(self) -> None:
        assert IniGroup(' window ').name == 'window'

    def test_get_or_create_keeps_first_values(self) -> None:
        group = IniGroup('g')
        first = group.get_or_create_record('k', '1')
        second = group.get_or_create_record(' k ', '2')
        assert first is second
        assert group['k'].values == ('1',)

    def test_records_in_insertion_order(self) -> None:
        group = IniGroup('g')
        for key in ('b', 'a', 'c'):
            group.get_or_create_record(key, key)
        assert list(group) == ['b', 'a', 'c']
        assert [i.key for i in group.records()] == ['b', 'a', 'c']
        assert len(group) == 3

    def test_remove_record(self) -> None:
        group = IniGroup('g')
        record = group.get_or_create_record('k', 'v')
        assert group.remove_record('k') is record
        assert group.remove_record('k') is None
        assert 'k' not in group


@pytest.mark.unit
class TestIniStore:
    def test_set_get(self) -> None:
        s = IniStore()
        s.set_value('window', 'size', '800', '600')
        assert s.get_value('window', 'size') == '800'
        assert s.get_values('window', 'size') == ('800', '600')

    def test_set_value_is_first_write_wins(self) -> None:
        s = IniStore()
        s.set_value('g', 'k', 'old')
        record = s.set_value('g', 'k', 'new')
        assert record.values == ('old',)
        assert s.get_value('g', 'k') == 'old'

    def test_set_value_blank_key_raises(self) -> None:
        s = IniStore()
        with pytest.raises(ValueError):
            s.set_value('g', '  ', 'v')
        assert len(s['g']) == 0

    def test_replace_through_remove(self) -> None:
        s = IniStore()
        s.set_value('g', 'k', 'old')
        s.remove_record('g', 'k')
        s.set_value('g', 'k', 'new')
        assert s.get_value('g', 'k') == 'new'

    def test_get_value_default(self) -> None:
        s = IniStore()
        assert s.get_value('missing', 'missing', 'fallback') == 'fallback'
        assert s.get_value('missing', 'missing') is None
        # the group itself is created on the way, but stays empty.
        assert len(s['missing']) == 0

    def test_get_value_empty_value_gives_default(self) -> None:
        s = IniStore()
        s.set_value('g', 'k', '')
        assert s.get_value('g', 'k', 'fallback') == 'fallback'
        assert s.get_values('g', 'k') == ('',)

    def test_get_values_default(self) -> None:
        s = IniStore()
        assert s.get_values('g', 'k', ['a']) == ['a']
        assert s.get_values('g', 'k') is None

    def test_get_group_does_not_create(self) -> None:
        s = IniStore()
        assert s.get_group('g') is None
        assert 'g' not in s

    def test_group_names_trimmed_and_ordered(self) -> None:
        s = IniStore()
        s.get_or_create_group(' b ')
        s.get_or_create_group('a')
        s.get_or_create_group('b')
        assert s.group_names() == ('b', 'a')
        assert [i.name for i in s.groups()] == ['b', 'a']
        assert len(s) == 2

    def test_remove_group(self) -> None:
        s = IniStore()
        group = s.get_or_create_group('g')
        assert s.remove_group('g') is group
        assert s.remove_group('g') is None

    def test_remove_record_of_missing_group(self) -> None:
        s = IniStore()
        assert s.remove_record('nope', 'k') is None
        assert 'nope' not in s

    def test_clear(self) -> None:
        s = IniStore()
        s.set_value('a', 'k', 'v')
        s.set_value('b', 'k', 'v')
        s.clear()
        assert len(s) == 0

    def test_equality(self) -> None:
        one, two = IniStore(), IniStore()
        for s in (one, two):
            s.set_value('g', 'k', '1', '2')
        assert one == two
        two.set_value('g', 'x', 'y')
        assert one != two

    def test_concurrent_writers(self) -> None:
        s = IniStore()

        def fill(prefix: str) -> None:
            for i in range(200):
                s.set_value(f'group{i % 5}', f'{prefix}{i}', str(i))

        threads = [Thread(target=fill, args=(p,)) for p in 'abcd']
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(s) == 5
        assert sum(len(g) for g in s.groups()) == 800
