from decimal import Decimal

from redis.exceptions import RedisError

from storefront.data.models import CartLineModel


def lines_of(db, user_id):
    return db.query(CartLineModel).filter(CartLineModel.user_id == user_id).all()


def test_add_twice_gives_one_line_with_quantity_two(db, cart_service, user, products):
    a, _ = products

    first = cart_service.add(user.id, a.id)
    second = cart_service.add(user.id, a.id)

    assert first.success and first.message == "Product added to cart"
    assert second.success and second.message == "Cart quantity updated"

    lines = lines_of(db, user.id)
    assert len(lines) == 1
    assert lines[0].quantity == 2


def test_add_keeps_price_snapshot(db, cart_service, user, products):
    a, _ = products
    cart_service.add(user.id, a.id)

    a.amount = Decimal("99.00")
    db.commit()
    cart_service.add(user.id, a.id)

    [line] = cart_service.list_lines(user.id)
    assert line.amount == Decimal("10.00")
    assert line.quantity == 2


def test_add_unknown_product_fails(cart_service, user):
    res = cart_service.add(user.id, 12345)

    assert not res.success
    assert res.message == "Product not found"


def test_add_when_line_locked_fails_without_write(db, cart_service, lock_service, user, products):
    a, _ = products
    lock_service.held.add((user.id, a.id))

    res = cart_service.add(user.id, a.id)

    assert not res.success
    assert res.message == "Cart is being updated, try again"
    assert lines_of(db, user.id) == []


def test_add_releases_lock(cart_service, lock_service, user, products):
    a, _ = products
    cart_service.add(user.id, a.id)

    assert lock_service.held == set()
    assert lock_service.acquired == [(user.id, a.id)]


def test_add_with_redis_down_fails_softly(cart_service, lock_service, user, products):
    def broken(*args, **kwargs):
        raise RedisError("connection refused")

    lock_service.acquire_cart_line_lock = broken

    res = cart_service.add(user.id, products[0].id)

    assert not res.success
    assert res.message == "Cart is temporarily unavailable"


def test_adjust_below_one_is_rejected_without_mutation(db, cart_service, user, products):
    a, _ = products
    cart_service.add(user.id, a.id)

    res = cart_service.adjust_quantity(user.id, a.id, -1)

    assert not res.success
    assert res.message == "Quantity cannot be less than 1"
    assert lines_of(db, user.id)[0].quantity == 1


def test_adjust_from_two_to_one(db, cart_service, user, products):
    a, _ = products
    cart_service.add(user.id, a.id)
    cart_service.add(user.id, a.id)

    res = cart_service.adjust_quantity(user.id, a.id, -1)

    assert res.success
    assert res.message == "Cart updated"
    assert lines_of(db, user.id)[0].quantity == 1


def test_adjust_missing_line(cart_service, user, products):
    res = cart_service.adjust_quantity(user.id, products[0].id, 1)

    assert not res.success
    assert res.message == "Item not found in cart"


def test_remove_is_scoped_to_owner(db, cart_service, user, other_user, products):
    a, _ = products
    cart_service.add(user.id, a.id)
    line_id = lines_of(db, user.id)[0].id

    foreign = cart_service.remove(other_user.id, line_id)
    assert not foreign.success
    assert len(lines_of(db, user.id)) == 1

    own = cart_service.remove(user.id, line_id)
    assert own.success
    assert own.message == "Item removed from cart"
    assert lines_of(db, user.id) == []


def test_list_is_newest_first_with_product_summary(cart_service, user, products):
    a, b = products
    cart_service.add(user.id, a.id)
    cart_service.add(user.id, b.id)

    lines = cart_service.list_lines(user.id)

    assert [line.product_id for line in lines] == [b.id, a.id]
    assert lines[0].product.name == "Watch Series 9"
    assert lines[0].product.amount == Decimal("5.00")


def test_unauthenticated_calls(cart_service, products):
    assert cart_service.list_lines(None) == []
    assert cart_service.add(None, products[0].id).message == "User not logged in"
    assert not cart_service.adjust_quantity(None, products[0].id, 1).success
    assert not cart_service.remove(None, 1).success


def test_clear_all_only_touches_own_cart(db, cart_service, user, other_user, products):
    a, b = products
    cart_service.add(user.id, a.id)
    cart_service.add(user.id, b.id)
    cart_service.add(other_user.id, a.id)

    assert cart_service.clear_all(user.id) == 2
    assert lines_of(db, user.id) == []
    assert len(lines_of(db, other_user.id)) == 1


def test_subtotal_uses_snapshot_price_times_quantity(cart_service, user, products):
    a, b = products
    cart_service.add(user.id, a.id)
    cart_service.add(user.id, a.id)
    cart_service.add(user.id, b.id)

    assert cart_service.subtotal(cart_service.list_lines(user.id)) == Decimal("25.00")
