import re
from concurrent.futures import ThreadPoolExecutor

from travel_booking.identifiers import IdGenerator


def fixed_clock(value: int = 1_700_000_000_000):
    return lambda: value


def test_booking_and_transaction_id_format():
    ids = IdGenerator()
    assert re.fullmatch(r"BK\d{13}", ids.next_booking_id())
    assert re.fullmatch(r"TRX\d{13}", ids.next_transaction_id())


def test_pair_shares_one_timestamp():
    """Booking and transaction ids of one order carry the same milliseconds."""
    ids = IdGenerator(clock=fixed_clock())
    id_booking, id_transaksi = ids.next_pair()
    assert id_booking == "BK1700000000000"
    assert id_transaksi == "TRX1700000000000"


def test_same_millisecond_still_unique():
    """A clock that does not move still yields increasing ids."""
    ids = IdGenerator(clock=fixed_clock())
    first = ids.next_booking_id()
    second = ids.next_booking_id()
    third, _ = ids.next_pair()

    assert first == "BK1700000000000"
    assert second == "BK1700000000001"
    assert third == "BK1700000000002"


def test_clock_going_backwards_does_not_repeat():
    ticks = iter([1000, 900, 1001])
    ids = IdGenerator(clock=lambda: next(ticks))
    assert [ids.next_timestamp() for _ in range(3)] == [1000, 1001, 1002]


def test_ids_unique_across_threads():
    ids = IdGenerator(clock=fixed_clock())
    with ThreadPoolExecutor(max_workers=8) as pool:
        issued = list(pool.map(lambda _: ids.next_booking_id(), range(200)))
    assert len(set(issued)) == 200


def test_user_id_uses_last_five_digits():
    ids = IdGenerator(clock=fixed_clock(1_700_000_012_345))
    assert ids.next_user_id() == "USR12345"
