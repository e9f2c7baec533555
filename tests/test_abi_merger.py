from full_abi.abi_merger import AbiMerger
from full_abi.models import ModuleRecord, parse_abi

from helpers import MOD_A, MOD_B, MOD_C, event, function

F1 = function("owner")
E1 = event("Upgraded", ("address", "implementation"))
E2 = event("Deposit", ("address", "user"), ("uint256", "amount"))
E3 = event("Withdraw", ("address", "user"), ("uint256", "amount"))


def module(index, address, *entries):
    return ModuleRecord(index, address, parse_abi(list(entries)), f"module_{index}")


def names(abi):
    return [entry.name for entry in abi]


def test_order_preservation_and_dedup():
    base = parse_abi([F1, E1])
    modules = [
        module(0, MOD_A, E1, E2),
        module(1, MOD_B, E2, E3),
    ]
    result = AbiMerger().merge(base, modules)

    assert names(result.full_abi) == ["owner", "Upgraded", "Deposit", "Withdraw"]
    assert result.full_abi[:2] == base
    assert names(result.added_events) == ["Deposit", "Withdraw"]
    assert result.stats.candidate_events == 4
    assert result.stats.duplicate_events == 1
    assert result.stats.added_events == 2


def test_merging_twice_is_idempotent():
    base = parse_abi([F1, E1])
    modules = [module(0, MOD_A, E2, E3), module(1, MOD_B, E3, E2)]
    merger = AbiMerger()

    once = merger.merge(base, modules).full_abi
    twice = merger.merge(once, modules).full_abi

    assert twice == once
    assert merger.merge(base, modules + modules).full_abi == once


def test_parameter_names_do_not_make_events_distinct():
    base = parse_abi([F1])
    modules = [
        module(0, MOD_A, event("Transfer", ("address", "from"), ("uint256", "amount"))),
        module(1, MOD_B, event("Transfer", ("address", "sender"), ("uint256", "amount"))),
    ]
    result = AbiMerger().merge(base, modules)

    assert len(result.added_events) == 1
    assert result.added_events[0].inputs[0].name == "from"


def test_overloaded_events_are_kept_apart():
    base = parse_abi([F1])
    modules = [module(0, MOD_A,
                      event("Transfer", ("address", "to"), ("uint256", "amount")),
                      event("Transfer", ("address", "to"), ("uint128", "amount")))]
    assert len(AbiMerger().merge(base, modules).added_events) == 2


def test_module_functions_are_not_merged():
    base = parse_abi([F1])
    modules = [module(0, MOD_A, function("deposit", inputs=("uint256",), mutability="nonpayable"), E2)]
    result = AbiMerger().merge(base, modules)

    assert names(result.full_abi) == ["owner", "Deposit"]


def test_no_modules_returns_base_unchanged():
    base = parse_abi([F1, E1, {"type": "fallback", "stateMutability": "payable"}])
    result = AbiMerger().merge(base, [])
    assert result.full_abi == base
    assert result.added_events == ()


def test_base_duplicate_events_are_left_alone():
    base = parse_abi([E1, E1])
    result = AbiMerger().merge(base, [module(0, MOD_C, E1)])
    assert result.full_abi == base
