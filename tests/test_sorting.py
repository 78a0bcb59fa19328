from liquidtpl.filters.sorting import sort_filter, sort_natural_filter


def test_sort_strings_bytewise():
    data = ["zebra", "octopus", "giraffe", "Sally Snake"]
    assert sort_filter(data, None) == ["Sally Snake", "giraffe", "octopus", "zebra"]


def test_sort_does_not_mutate_and_is_permutation():
    data = [5, 3, 9, 1, 3]
    result = sort_filter(data, None)
    assert data == [5, 3, 9, 1, 3]
    assert sorted(data) == result


def test_sort_nil_first():
    result = sort_filter([3, None, 1], None)
    assert result[0] is None
    assert result[1:] == [1, 3]


def test_sort_by_property_nil_first():
    data = [{"weight": 1}, {"weight": 5}, {"weight": 3}, {"weight": None}]
    result = sort_filter(data, "weight")
    assert [d["weight"] for d in result] == [None, 1, 3, 5]


def test_sort_natural_case_insensitive():
    assert sort_natural_filter(["c", "a", "B"], None) == ["a", "B", "c"]


def test_sort_natural_by_key():
    data = [{"key": "c"}, {"key": "a"}, {"key": "B"}]
    result = sort_natural_filter(data, "key")
    assert [d["key"] for d in result] == ["a", "B", "c"]


def test_sort_natural_empty_and_non_strings():
    assert sort_natural_filter([], None) == []
    assert sort_natural_filter([3, 1, 2], None) == [3, 1, 2]