from apps.checkout.services.basket import Basket, BasketItem, BasketStore


class FakeSession(dict):
    modified = False


def make_item(amount, frequency='ONE_OFF', **kwargs):
    return BasketItem(appeal_title='Emergency Relief', amount_pence=amount, frequency=frequency, **kwargs)


class TestBasket:

    def test_subtotals_by_frequency(self):
        basket = Basket()
        basket.add(make_item(1000))
        basket.add(make_item(500, 'MONTHLY'))
        basket.add(make_item(1200, 'YEARLY'))

        assert len(basket) == 3
        assert basket.one_off_subtotal_pence == 1000
        assert basket.recurring_subtotal_pence == 1700
        assert basket.has_recurring is True

    def test_summary_uses_fee_split(self):
        basket = Basket(cover_fees=True)
        basket.add(make_item(1000))
        basket.add(make_item(1000, 'MONTHLY'))

        summary = basket.summary()

        assert summary.fees_pence == 44
        assert summary.one_off_fees_pence == 22
        assert summary.recurring_fees_pence == 22

    def test_summary_cover_fees_override(self):
        basket = Basket(cover_fees=True)
        basket.add(make_item(1000))

        assert basket.summary(cover_fees=False).fees_pence == 0

    def test_empty_basket_summary_is_zero(self):
        summary = Basket(cover_fees=True).summary()

        assert summary.fees_pence == 0
        assert summary.total_pence == 0

    def test_add_duplicate_id_gets_new_id(self):
        basket = Basket()
        first = basket.add(make_item(1000, id='abc'))
        second = basket.add(make_item(2000, id='abc'))

        assert first.id == 'abc'
        assert second.id != 'abc'
        assert len(basket) == 2

    def test_remove(self):
        basket = Basket()
        item = basket.add(make_item(1000))

        assert basket.remove('missing') is False
        assert basket.remove(item.id) is True
        assert basket.is_empty

    def test_clear_resets_cover_fees(self):
        basket = Basket(cover_fees=True)
        basket.add(make_item(1000))

        basket.clear()

        assert basket.is_empty
        assert basket.cover_fees is False


class TestBasketSerialization:

    def test_from_dict_survives_bad_data(self):
        basket = Basket.from_dict({
            'items': [
                {'appeal_title': 'Water', 'amount_pence': 'oops', 'unknown_key': 1},
                'not-an-item',
            ],
            'cover_fees': 1,
        })

        assert len(basket) == 1
        assert basket.items[0].amount_pence == 0
        assert basket.cover_fees is True

    def test_from_dict_of_none_is_empty(self):
        assert Basket.from_dict(None).is_empty

    def test_ids_are_stored_as_strings(self):
        item = BasketItem.from_dict({'appeal_title': 'Water', 'amount_pence': 100, 'appeal_id': 42})

        assert item.appeal_id == '42'


class TestBasketStore:

    def test_save_and_load_against_session(self, settings):
        settings.BASKET_SESSION_KEY = 'basket'
        session = FakeSession()
        basket = Basket(cover_fees=True)
        item = basket.add(make_item(2500, 'MONTHLY', product_name='Food Pack'))

        BasketStore.save(session, basket)
        loaded = BasketStore.load(session)

        assert loaded.cover_fees is True
        assert loaded.items == [item]
        assert session.modified is True

    def test_clear_removes_basket(self):
        session = FakeSession(basket={'items': [], 'cover_fees': True})

        BasketStore.clear(session)

        assert 'basket' not in session
