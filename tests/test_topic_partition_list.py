import pytest

from kafkaparts.topic_partition_list import (
    KafkaError,
    Offset,
    OffsetFetchError,
    OffsetKind,
    SetPartitionOffsetError,
    TopicPartitionList,
)


def test_offset_conversion():
    assert Offset.at(123).to_raw() == 123
    assert Offset.from_raw(123) == Offset.at(123)
    assert Offset.tail(10).to_raw() == -2010
    assert Offset.from_raw(-2010) == Offset.tail(10)


@pytest.mark.parametrize(
    "raw,offset",
    [
        (-2, Offset.beginning()),
        (-1, Offset.end()),
        (-1000, Offset.stored()),
        (-1001, Offset.invalid()),
        (-2000, Offset.tail(0)),
        (0, Offset.at(0)),
    ],
)
def test_offset_from_raw_specials(raw, offset):
    assert Offset.from_raw(raw) == offset


@pytest.mark.parametrize("offset", [Offset.at(-1), Offset.tail(0), Offset.tail(-1)])
def test_unrepresentable_offsets(offset):
    assert offset.to_raw() is None


def test_offset_kind_and_repr():
    assert Offset.tail(3).kind is OffsetKind.OFFSET_TAIL
    assert repr(Offset.at(5)) == "Offset(5)"
    assert repr(Offset.beginning()) == "Beginning"


def test_add_partition_offset_find():
    tpl = TopicPartitionList()
    tpl.add_partition("topic1", 0)
    tpl.add_partition("topic1", 1)
    tpl.add_partition("topic2", 0)
    tpl.add_partition("topic2", 1)

    tpl.set_partition_offset("topic1", 0, Offset.at(0))
    tpl.set_partition_offset("topic1", 1, Offset.at(1))
    tpl.set_partition_offset("topic2", 0, Offset.at(2))
    tpl.set_partition_offset("topic2", 1, Offset.at(3))

    assert len(tpl) == 4
    with pytest.raises(SetPartitionOffsetError):
        tpl.set_partition_offset("topic0", 3, Offset.at(0))
    with pytest.raises(SetPartitionOffsetError):
        tpl.set_partition_offset("topic3", 0, Offset.at(0))

    tp0 = tpl.find_partition("topic1", 0)
    tp1 = tpl.find_partition("topic1", 1)
    tp2 = tpl.find_partition("topic2", 0)
    tp3 = tpl.find_partition("topic2", 1)
    assert (tp0.topic, tp0.partition, tp0.offset) == ("topic1", 0, Offset.at(0))
    assert (tp1.topic, tp1.partition, tp1.offset) == ("topic1", 1, Offset.at(1))
    assert (tp2.topic, tp2.partition, tp2.offset) == ("topic2", 0, Offset.at(2))
    assert (tp3.topic, tp3.partition, tp3.offset) == ("topic2", 1, Offset.at(3))

    tp3.set_offset(Offset.at(1234))
    assert tp3.offset == Offset.at(1234)
    assert tpl.find_partition("topic2", 1).offset == Offset.at(1234)


def test_add_partition_range():
    tpl = TopicPartitionList()
    tpl.add_partition_range("topic1", 0, 3)
    for partition in range(4):
        tpl.set_partition_offset("topic1", partition, Offset.at(partition))
    assert len(tpl) == 4
    with pytest.raises(SetPartitionOffsetError):
        tpl.set_partition_offset("topic1", 4, Offset.at(2))


def test_check_defaults():
    tpl = TopicPartitionList()
    tpl.add_partition("topic1", 0)
    assert tpl.find_partition("topic1", 0).offset == Offset.invalid()


def test_add_partition_offset_clone():
    tpl = TopicPartitionList()
    tpl.add_partition_offset("topic1", 0, Offset.at(0))
    tpl.add_partition_offset("topic1", 1, Offset.at(1))

    cloned = tpl.copy()
    for source in (tpl, cloned):
        tp0 = source.find_partition("topic1", 0)
        tp1 = source.find_partition("topic1", 1)
        assert (tp0.topic, tp0.partition, tp0.offset) == ("topic1", 0, Offset.at(0))
        assert (tp1.topic, tp1.partition, tp1.offset) == ("topic1", 1, Offset.at(1))

    cloned.find_partition("topic1", 0).set_offset(Offset.at(99))
    assert tpl.find_partition("topic1", 0).offset == Offset.at(0)


def test_topic_map():
    topic_map = {
        ("topic1", 0): Offset.invalid(),
        ("topic1", 1): Offset.at(123),
        ("topic2", 0): Offset.beginning(),
    }
    tpl = TopicPartitionList.from_topic_map(topic_map)
    topic_map2 = tpl.to_topic_map()
    tpl2 = TopicPartitionList.from_topic_map(topic_map2)
    assert topic_map == topic_map2
    assert tpl == tpl2


def test_invalid_offsets_are_rejected():
    tpl = TopicPartitionList()
    with pytest.raises(SetPartitionOffsetError) as info:
        tpl.add_partition_offset("topic", 0, Offset.tail(-1))
    assert info.value.code == "InvalidArgument"
    with pytest.raises(SetPartitionOffsetError) as info:
        tpl.set_all_offsets(Offset.tail(-1))
    assert info.value == SetPartitionOffsetError("InvalidArgument")


def test_missing_partition_error_code():
    tpl = TopicPartitionList()
    with pytest.raises(SetPartitionOffsetError) as info:
        tpl.set_partition_offset("missing", 0, Offset.at(1))
    assert info.value.code == "UnknownPartition"
    assert isinstance(info.value, KafkaError)


def test_set_all_offsets():
    tpl = TopicPartitionList()
    tpl.add_partition_range("t", 0, 2)
    tpl.set_all_offsets(Offset.end())
    assert [e.offset for e in tpl] == [Offset.end()] * 3


def test_set_all_offsets_on_empty_list_accepts_anything():
    tpl = TopicPartitionList()
    tpl.set_all_offsets(Offset.at(-5))
    assert len(tpl) == 0


def test_elements_and_elements_for_topic():
    tpl = TopicPartitionList()
    tpl.add_partition("a", 0)
    tpl.add_partition("b", 0)
    tpl.add_partition("a", 1)
    assert [(e.topic, e.partition) for e in tpl.elements()] == [("a", 0), ("b", 0), ("a", 1)]
    assert [e.partition for e in tpl.elements_for_topic("a")] == [0, 1]
    assert tpl.elements_for_topic("c") == []


def test_add_topic_unassigned():
    tpl = TopicPartitionList()
    elem = tpl.add_topic_unassigned("topic")
    assert elem.partition == -1
    assert tpl.find_partition("topic", -1) is elem


def test_capacity_growth():
    tpl = TopicPartitionList()
    assert tpl.capacity() == 5
    for partition in range(6):
        tpl.add_partition("t", partition)
    assert tpl.capacity() == 37
    assert len(tpl) == 6


def test_metadata_affects_equality():
    first = TopicPartitionList()
    first.add_partition_offset("t", 0, Offset.at(1))
    second = first.copy()
    assert first == second
    second.find_partition("t", 0).metadata = "one"
    assert not first == second


def test_equality_requires_same_count():
    first = TopicPartitionList()
    first.add_partition("t", 0)
    second = first.copy()
    second.add_partition("t", 1)
    assert not first == second


def test_check_error():
    tpl = TopicPartitionList()
    elem = tpl.add_partition("t", 0)
    elem.check_error()
    elem.error = "UnknownPartition"
    with pytest.raises(OffsetFetchError) as info:
        elem.check_error()
    assert info.value.code == "UnknownPartition"


def test_repr():
    tpl = TopicPartitionList()
    tpl.add_partition_offset("t", 0, Offset.at(3))
    tpl.add_partition("u", 1)
    assert repr(tpl) == (
        "TPL {t/0: offset=Offset(3) metadata='', error=None; "
        "u/1: offset=Invalid metadata='', error=None}"
    )


def test_topic_with_nul_is_rejected():
    tpl = TopicPartitionList()
    with pytest.raises(ValueError):
        tpl.add_partition("bad\0topic", 0)