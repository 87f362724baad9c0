import pytest

from blocktime.errors import FetchExhausted, InsufficientHistory, NoEndpointAvailable
from blocktime.estimator import estimate, format_duration, render, run
from blocktime.rpc import RpcClient
from configuration.types import EstimatorConfiguration, RetryPolicy

from conftest import BASE_TIME, FakeSession, block_payload, block_time, status_payload

URL = "http://node"


def client_for(routes, retry):
    return RpcClient(URL, session=FakeSession(routes), retry=retry, sleep=lambda _: None)


def test_estimate_from_window(no_retry_delay):
    client = client_for(
        {
            f"{URL}/block": block_payload("15397", block_time(1137)),
            f"{URL}/block?height=15197": block_payload("15197", block_time(0)),
        },
        no_retry_delay,
    )
    result = estimate(client, 200, 115_397, now=BASE_TIME)

    assert result.average_block_seconds == pytest.approx(5.685)
    assert result.blocks_remaining == 100_000
    assert result.seconds_remaining == pytest.approx(568_500)
    assert format_duration(result.seconds_remaining) == (
        "6 days 13 hours 55 minutes 00 seconds"
    )
    assert (result.projected_time - BASE_TIME).total_seconds() == pytest.approx(
        568_500, abs=1
    )
    assert result.window.size == 200
    assert not result.passed


def test_estimate_far_future_height(no_retry_delay):
    client = client_for(
        {
            f"{URL}/block": block_payload("15397", block_time(1137)),
            f"{URL}/block?height=15197": block_payload("15197", block_time(0)),
        },
        no_retry_delay,
    )
    result = estimate(client, 200, 10**12, now=BASE_TIME)

    assert result.projected_time is None
    assert not result.passed
    lines = render(result)
    assert lines[-1] == "beyond year 9999"
    assert lines[-2] == "Estimated upgrade block time is:"


def test_estimate_clamps_start_height(no_retry_delay):
    client = client_for(
        {
            f"{URL}/block": block_payload("501", block_time(3000)),
            f"{URL}/block?height=1": block_payload("1", block_time(0)),
        },
        no_retry_delay,
    )
    result = estimate(client, 1000, 1001, now=BASE_TIME)

    assert result.window.start_height == 1
    assert result.window.size == 500
    assert result.average_block_seconds == pytest.approx(6.0)
    assert result.seconds_remaining == pytest.approx(3000)


def test_estimate_upgrade_already_passed(no_retry_delay):
    client = client_for(
        {
            f"{URL}/block": block_payload("2000", block_time(5000)),
            f"{URL}/block?height=1000": block_payload("1000", block_time(0)),
        },
        no_retry_delay,
    )
    result = estimate(client, 1000, 1900, now=BASE_TIME)

    assert result.passed
    assert result.blocks_remaining == -100
    assert result.seconds_remaining == pytest.approx(-500)
    assert result.projected_time < BASE_TIME
    assert "was passed 100 blocks ago" in render(result)[1]
    assert render(result)[2] == "0 days 00 hours 08 minutes 20 seconds ago"


def test_estimate_genesis_is_insufficient(no_retry_delay):
    client = client_for({f"{URL}/block": block_payload("1", block_time(0))}, no_retry_delay)
    with pytest.raises(InsufficientHistory):
        estimate(client, 1000, 10)


def test_estimate_start_block_failure_is_fatal(no_retry_delay):
    client = client_for({f"{URL}/block": block_payload("15397", block_time(0))}, no_retry_delay)
    with pytest.raises(FetchExhausted):
        estimate(client, 200, 20_000)


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (568_500, "6 days 13 hours 55 minutes 00 seconds"),
        (59.6, "0 days 00 hours 01 minutes 00 seconds"),
        (0, "0 days 00 hours 00 minutes 00 seconds"),
        (90_061, "1 days 01 hours 01 minutes 01 seconds"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_render_future_upgrade(no_retry_delay):
    client = client_for(
        {
            f"{URL}/block": block_payload("15397", block_time(1137)),
            f"{URL}/block?height=15197": block_payload("15197", block_time(0)),
        },
        no_retry_delay,
    )
    lines = render(estimate(client, 200, 115_397, now=BASE_TIME))

    assert lines[0] == (
        "Average block time for 200 blocks range (15197 - 15397) is 5.685sec"
    )
    assert lines[1] == "Estimated time to upgrade at 115397 (based on 200 blocks) is:"
    assert lines[2] == "6 days 13 hours 55 minutes 00 seconds"
    assert lines[3] == "Estimated upgrade block time is:"


def estimator_routes(rpc):
    # 15397 with 5.685s blocks, the dynamic range then resolves to 15197
    return {
        f"{rpc}/block": block_payload("15397", block_time(15397 * 5.685)),
        f"{rpc}/block?height=15197": block_payload("15197", block_time(15197 * 5.685)),
        f"{rpc}/block?height=200": block_payload("200", block_time(200 * 5.685)),
        f"{rpc}/status": status_payload("atomone-testnet-1"),
    }


def test_run_end_to_end_with_fallback():
    config = EstimatorConfiguration(
        rpc_urls=["http://local", "http://remote"],
        upgrade_height=115_397,
        retry=RetryPolicy(delay_s=0),
    )
    session = FakeSession(estimator_routes("http://remote"))
    out = []

    result = run(config, session=session, output=out.append)

    assert out[0] == "Using RPC: http://remote"
    assert "Dynamic RANGE set to: 15197 blocks" in out
    assert result.window.start_height == 200
    assert result.blocks_remaining == 100_000
    assert result.average_block_seconds == pytest.approx(5.685)
    assert "Network: atomone-testnet-1" in out
    assert out[-1] == "Endpoint used: http://remote"


def test_run_without_status_still_reports():
    routes = estimator_routes("http://local")
    del routes["http://local/status"]
    config = EstimatorConfiguration(
        rpc_urls=["http://local"], upgrade_height=20_000, retry=RetryPolicy(delay_s=0)
    )
    out = []

    run(config, session=FakeSession(routes), output=out.append)

    assert "Network: Unable to fetch" in out


def test_run_no_endpoint():
    config = EstimatorConfiguration(rpc_urls=["http://a", "http://b"], upgrade_height=1)
    with pytest.raises(NoEndpointAvailable):
        run(config, session=FakeSession({}), output=lambda _: None)
