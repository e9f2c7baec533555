import pytest

from full_abi.core import AbiAssembler
from full_abi.discovery import GetterListSource, IndexProbeSource, ProxyIndexProbeSource
from full_abi.errors import (
    AbiNotFound,
    InvalidAddressError,
    ModuleAccessorMissing,
    ProxyResolutionFailed,
    UnsupportedNetworkError,
)
from full_abi.models import Network

from helpers import (
    IMPL,
    MAIN,
    MOD_A,
    MOD_B,
    FakeAbiSource,
    FakeChainProbe,
    MemoryPersistence,
    accessor,
    event,
    function,
)
from full_abi.models import Network

UPGRADED = event("Upgraded", ("address", "implementation"))
DEPOSIT = event("Deposit", ("address", "user"), ("uint256", "amount"))
WITHDRAW = event("Withdraw", ("address", "user"), ("uint256", "amount"))
BASE = [accessor(), function("owner"), UPGRADED]


def assembler(probe, source, persistence=None, strategy=None):
    return AbiAssembler(
        abi_source=source,
        chain_probe=probe,
        persistence=persistence or MemoryPersistence(),
        source=strategy or IndexProbeSource(),
    )


def test_index_probe_run_merges_and_persists_everything():
    probe = FakeChainProbe({("modules", (0,)): MOD_A, ("modules", (1,)): MOD_B})
    source = FakeAbiSource({
        MAIN: BASE,
        MOD_A: [UPGRADED, DEPOSIT, function("deposit", inputs=("uint256",), mutability="nonpayable")],
        MOD_B: [DEPOSIT, WITHDRAW],
    })
    persistence = MemoryPersistence()

    result = assembler(probe, source, persistence).assemble(MAIN, "mainnet")

    assert [e.name for e in result.full_abi] == ["modules", "owner", "Upgraded", "Deposit", "Withdraw"]
    assert [m.label for m in result.modules] == ["module_0", "module_1"]
    assert result.warnings == []
    assert set(persistence.saved) == {"baseAbi", "module_0", "module_1", "fullAbi"}
    assert persistence.saved["baseAbi"] == BASE
    assert persistence.saved["fullAbi"] == BASE + [DEPOSIT, WITHDRAW]


def test_zero_module_run_returns_base_abi_with_warning():
    probe = FakeChainProbe()
    source = FakeAbiSource({MAIN: BASE})
    persistence = MemoryPersistence()

    result = assembler(probe, source, persistence).assemble(MAIN, "mainnet")

    assert result.modules == []
    assert result.full_abi == result.base_abi
    assert len(result.warnings) == 1
    assert persistence.saved["fullAbi"] == BASE


def test_missing_accessor_fails_before_any_probe():
    probe = FakeChainProbe()
    source = FakeAbiSource({MAIN: [function("owner"), UPGRADED]})

    with pytest.raises(ModuleAccessorMissing):
        assembler(probe, source).assemble(MAIN, "mainnet")
    assert probe.calls == []
    assert probe.storage_reads == []


def test_unsupported_network_fails_before_network_activity():
    probe = FakeChainProbe()
    source = FakeAbiSource({MAIN: BASE})

    with pytest.raises(UnsupportedNetworkError, match="polygon"):
        assembler(probe, source).assemble(MAIN, "polygon")
    assert source.fetched == []
    assert probe.calls == []


def test_invalid_address_is_rejected():
    source = FakeAbiSource({})
    with pytest.raises(InvalidAddressError):
        assembler(FakeChainProbe(), source).assemble("0x1234", "mainnet")
    assert source.fetched == []


def test_base_abi_fetch_failure_is_fatal():
    with pytest.raises(AbiNotFound):
        assembler(FakeChainProbe(), FakeAbiSource({})).assemble(MAIN, "mainnet")


def test_proxy_variant_uses_implementation_abi_and_calls_the_proxy():
    word = bytes(12) + bytes.fromhex(IMPL[2:])
    probe = FakeChainProbe({("modules", (0,)): MOD_A}, storage={MAIN: word})
    source = FakeAbiSource({IMPL: BASE, MOD_A: [DEPOSIT]})

    result = assembler(probe, source, strategy=ProxyIndexProbeSource()).assemble(MAIN, "mainnet")

    assert result.abi_address == IMPL
    assert source.fetched[0] == IMPL.lower()
    assert MAIN.lower() not in source.fetched
    assert all(target == MAIN for target, _, _ in probe.calls)
    assert [e.name for e in result.added_events] == ["Deposit"]


def test_proxy_without_implementation_aborts():
    probe = FakeChainProbe()
    source = FakeAbiSource({MAIN: BASE})

    with pytest.raises(ProxyResolutionFailed):
        assembler(probe, source, strategy=ProxyIndexProbeSource()).assemble(MAIN, "mainnet")
    assert source.fetched == []


def test_getter_list_run_merges_only_fetched_modules():
    base = [function("a"), function("b"), function("c")]
    probe = FakeChainProbe({("a", ()): MOD_A, ("b", ()): MOD_B, ("c", ()): IMPL})
    source = FakeAbiSource({MAIN: base, MOD_A: [DEPOSIT], IMPL: [WITHDRAW]})
    persistence = MemoryPersistence()

    result = assembler(probe, source, persistence, GetterListSource(["a", "b", "c"])).assemble(MAIN, "sepolia")

    assert [m.label for m in result.modules] == ["a", "c"]
    assert [e.name for e in result.added_events] == ["Deposit", "Withdraw"]
    assert len(result.warnings) == 1
    assert set(persistence.saved) == {"baseAbi", "a", "c", "fullAbi"}


def test_persistence_failures_do_not_abort_the_run():
    probe = FakeChainProbe({("modules", (0,)): MOD_A})
    source = FakeAbiSource({MAIN: BASE, MOD_A: [DEPOSIT]})
    persistence = MemoryPersistence(fail_labels={"baseAbi", "module_0"})

    result = assembler(probe, source, persistence).assemble(MAIN, "mainnet")

    assert [e.name for e in result.added_events] == ["Deposit"]
    assert set(persistence.saved) == {"fullAbi"}
    assert len(result.warnings) == 2


def test_resolved_network_is_used_as_is():
    probe = FakeChainProbe({("modules", (0,)): MOD_A})
    source = FakeAbiSource({MAIN: BASE, MOD_A: [DEPOSIT]})
    custom = Network("mainnet", 1, "http://localhost:8545")

    result = assembler(probe, source).assemble(MAIN, custom)

    assert result.network == custom
    assert result.network.rpc_url == "http://localhost:8545"
