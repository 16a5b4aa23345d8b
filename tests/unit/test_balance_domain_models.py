from src.ll_balance.domain.models import BalanceLedger, DebitSplit, split_bonus_first


class TestBalanceLedger:
    def test_total(self) -> None:
        ledger = BalanceLedger(user_id="user-1", wallet_cents=300, bonus_cents=200)
        assert ledger.total_cents == 500

    def test_defaults_empty(self) -> None:
        ledger = BalanceLedger(user_id="user-1")
        assert ledger.total_cents == 0
        assert ledger.version == 0


class TestSplitBonusFirst:
    def test_bonus_then_wallet(self) -> None:
        ledger = BalanceLedger(user_id="u", wallet_cents=300, bonus_cents=200)
        assert split_bonus_first(ledger, 400) == DebitSplit(from_bonus=200, from_wallet=200)

    def test_bonus_covers_all(self) -> None:
        ledger = BalanceLedger(user_id="u", wallet_cents=300, bonus_cents=200)
        assert split_bonus_first(ledger, 150) == DebitSplit(from_bonus=150, from_wallet=0)

    def test_no_bonus(self) -> None:
        ledger = BalanceLedger(user_id="u", wallet_cents=300, bonus_cents=0)
        assert split_bonus_first(ledger, 300) == DebitSplit(from_bonus=0, from_wallet=300)

    def test_exact_total(self) -> None:
        ledger = BalanceLedger(user_id="u", wallet_cents=300, bonus_cents=200)
        split = split_bonus_first(ledger, 500)
        assert split is not None
        assert split.total == 500

    def test_insufficient_returns_none(self) -> None:
        ledger = BalanceLedger(user_id="u", wallet_cents=300, bonus_cents=200)
        assert split_bonus_first(ledger, 501) is None
