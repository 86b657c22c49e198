# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio

import httpx
import pytest

from apiprobe.config import ProbeSettings
from apiprobe.dispatch.engine import REQUEST_ID_PREFIX, ProbeDispatcher, dispatch
from apiprobe.errors import DispatchError, ErrorCategory, TargetValidationError
from apiprobe.http.adapters import StubHttpClient
from apiprobe.http.httpx_client import HttpxClient
from apiprobe.http.models import HttpResponse
from apiprobe.models import EndpointSpec, Status, TargetDefinition

BASE = "http://svc.test"


def ok(status: int) -> HttpResponse:
    return HttpResponse(ok=True, status_code=status)


def target(*endpoints, base_url=BASE, timeout=None) -> TargetDefinition:
    return TargetDefinition(base_url=base_url, endpoints=tuple(endpoints), max_timeout_seconds=timeout)


@pytest.mark.asyncio
async def test_all_endpoints_pass_against_live_server(live_server):
    settings = ProbeSettings()
    client = HttpxClient(settings)
    try:
        result = await ProbeDispatcher(client, settings).dispatch(
            target(
                EndpointSpec("/home", "GET", 200),
                EndpointSpec("/healthz", "GET", 200),
                base_url=live_server,
            )
        )
    finally:
        await client.aclose()

    assert result.overall_verdict == Status.PASS
    assert [o.path for o in result.outcomes] == ["/home", "/healthz"]
    assert all(o.verdict == Status.PASS for o in result.outcomes)
    assert result.base_url == live_server


@pytest.mark.asyncio
async def test_status_mismatch_fails_run_without_error(live_server):
    result = await dispatch(
        target(
            EndpointSpec("/index", "GET", 200),
            EndpointSpec("/will-fail", "GET", 200),
            base_url=live_server,
        ),
        settings=ProbeSettings(),
    )

    assert result.overall_verdict == Status.FAIL
    index, will_fail = result.outcomes
    assert index.verdict == Status.PASS
    assert index.actual_status == 200
    assert will_fail.verdict == Status.FAIL
    assert will_fail.actual_status == 400
    assert will_fail.expected_status == 200


@pytest.mark.asyncio
async def test_unreachable_server_voids_run(closed_port_url):
    with pytest.raises(DispatchError) as excinfo:
        await dispatch(target(EndpointSpec("/home", "GET", 200), base_url=closed_port_url), settings=ProbeSettings())

    err = excinfo.value
    assert "Failed to make 1 requests" in str(err)
    assert "/home" in str(err)
    assert err.failed_paths == ["/home"]
    assert err.failures[0].category == ErrorCategory.CONNECTION_ERROR.value
    assert err.request_id.startswith(REQUEST_ID_PREFIX)


@pytest.mark.asyncio
async def test_default_timeout_applies_to_every_probe():
    client = StubHttpClient({f"{BASE}/a": ok(200), f"{BASE}/b": ok(200)})
    await ProbeDispatcher(client, ProbeSettings()).dispatch(
        target(EndpointSpec("/a", "GET", 200), EndpointSpec("/b", "GET", 200))
    )

    assert [r.timeout for r in client.requests] == [5.0, 5.0]


@pytest.mark.asyncio
async def test_explicit_timeout_overrides_default():
    client = StubHttpClient({f"{BASE}/a": ok(200)})
    await ProbeDispatcher(client, ProbeSettings()).dispatch(target(EndpointSpec("/a", "GET", 200), timeout=2))

    assert client.requests[0].timeout == 2.0


@pytest.mark.asyncio
async def test_slow_drip_response_times_out_on_wall_clock(live_server):
    loop = asyncio.get_running_loop()
    started = loop.time()
    with pytest.raises(DispatchError) as excinfo:
        await dispatch(
            target(EndpointSpec("/slow-drip", "GET", 200), base_url=live_server, timeout=1),
            settings=ProbeSettings(),
        )
    elapsed = loop.time() - started

    failure = excinfo.value.failures[0]
    assert failure.path == "/slow-drip"
    assert failure.category == ErrorCategory.TIMEOUT.value
    assert elapsed < 2.5


@pytest.mark.asyncio
async def test_unbounded_fan_out_beyond_default_pool_size_passes(live_server):
    paths = [f"/delayed/{i}" for i in range(150)]
    result = await dispatch(
        target(*(EndpointSpec(p, "GET", 200) for p in paths), base_url=live_server, timeout=1),
        settings=ProbeSettings(max_concurrency=None),
    )

    assert result.overall_verdict == Status.PASS
    assert [o.path for o in result.outcomes] == paths


@pytest.mark.asyncio
async def test_outcomes_follow_input_order_not_completion_order():
    paths = ["/slow", "/medium", "/fast"]
    client = StubHttpClient(
        {f"{BASE}{p}": ok(200) for p in paths},
        delays={f"{BASE}/slow": 0.06, f"{BASE}/medium": 0.03, f"{BASE}/fast": 0.0},
    )
    result = await ProbeDispatcher(client, ProbeSettings()).dispatch(
        target(*(EndpointSpec(p, "GET", 200) for p in paths))
    )

    assert client.completed == [f"{BASE}/fast", f"{BASE}/medium", f"{BASE}/slow"]
    assert [o.path for o in result.outcomes] == paths


@pytest.mark.asyncio
async def test_methods_and_urls_are_forwarded():
    client = StubHttpClient()
    client.add(f"{BASE}/items", ok(201), method="POST")
    client.add(f"{BASE}/items/1", ok(204), method="DELETE")
    result = await ProbeDispatcher(client, ProbeSettings()).dispatch(
        target(EndpointSpec("/items", "POST", 201), EndpointSpec("items/1", "DELETE", 204))
    )

    assert [(r.method, r.url) for r in client.requests] == [
        ("POST", f"{BASE}/items"),
        ("DELETE", f"{BASE}/items/1"),
    ]
    assert result.overall_verdict == Status.PASS


@pytest.mark.asyncio
async def test_single_transport_failure_discards_successful_outcomes():
    client = StubHttpClient(
        {
            f"{BASE}/up": ok(200),
            f"{BASE}/down": HttpResponse(
                ok=False,
                error_category=ErrorCategory.TIMEOUT.value,
                error_message="timed out",
                error_type="ReadTimeout",
            ),
        }
    )
    with pytest.raises(DispatchError) as excinfo:
        await ProbeDispatcher(client, ProbeSettings()).dispatch(
            target(EndpointSpec("/up", "GET", 200), EndpointSpec("/down", "GET", 200))
        )

    assert excinfo.value.failed_paths == ["/down"]
    failure = excinfo.value.failures[0]
    assert failure.category == ErrorCategory.TIMEOUT.value
    assert failure.url == f"{BASE}/down"
    assert "timed out" in str(excinfo.value)
    assert len(client.requests) == 2


@pytest.mark.asyncio
async def test_every_transport_failure_is_enumerated():
    client = StubHttpClient({f"{BASE}/ok": ok(200)})
    with pytest.raises(DispatchError) as excinfo:
        await ProbeDispatcher(client, ProbeSettings()).dispatch(
            target(
                EndpointSpec("/missing-a", "GET", 200),
                EndpointSpec("/ok", "GET", 200),
                EndpointSpec("/missing-b", "PUT", 200),
            )
        )

    message = str(excinfo.value)
    assert message.startswith("Failed to make 2 requests")
    assert "/missing-a" in message and "/missing-b" in message
    assert excinfo.value.failed_paths == ["/missing-a", "/missing-b"]


@pytest.mark.asyncio
async def test_raising_client_is_treated_as_transport_failure():
    request = httpx.Request("GET", f"{BASE}/a")
    client = StubHttpClient({f"{BASE}/a": httpx.ConnectError("refused", request=request)})
    with pytest.raises(DispatchError) as excinfo:
        await ProbeDispatcher(client, ProbeSettings()).dispatch(target(EndpointSpec("/a", "GET", 200)))

    failure = excinfo.value.failures[0]
    assert failure.category == ErrorCategory.CONNECTION_ERROR.value
    assert failure.error_type == "ConnectError"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "bad_target",
    [
        TargetDefinition(base_url="", endpoints=(EndpointSpec("/a", "GET", 200),)),
        TargetDefinition(base_url=BASE, endpoints=()),
        TargetDefinition(base_url=BASE, endpoints=(EndpointSpec("/a", "GET", 200), EndpointSpec("/b", "HEAD", 200))),
        TargetDefinition(base_url=BASE, endpoints=(EndpointSpec("/a", "GET", 200),), max_timeout_seconds=0),
    ],
)
async def test_validation_happens_before_any_probe(bad_target):
    client = StubHttpClient({f"{BASE}/a": ok(200)})
    with pytest.raises(TargetValidationError):
        await ProbeDispatcher(client, ProbeSettings()).dispatch(bad_target)
    assert client.requests == []


@pytest.mark.asyncio
async def test_concurrency_is_bounded_by_settings():
    paths = [f"/p{i}" for i in range(10)]
    client = StubHttpClient(
        {f"{BASE}{p}": ok(200) for p in paths},
        delays={f"{BASE}{p}": 0.02 for p in paths},
    )
    result = await ProbeDispatcher(client, ProbeSettings(max_concurrency=3)).dispatch(
        target(*(EndpointSpec(p, "GET", 200) for p in paths))
    )

    assert client.max_in_flight == 3
    assert [o.path for o in result.outcomes] == paths


@pytest.mark.asyncio
async def test_unbounded_fan_out_launches_every_probe_together():
    paths = [f"/p{i}" for i in range(8)]
    client = StubHttpClient(
        {f"{BASE}{p}": ok(200) for p in paths},
        delays={f"{BASE}{p}": 0.02 for p in paths},
    )
    await ProbeDispatcher(client, ProbeSettings(max_concurrency=None)).dispatch(
        target(*(EndpointSpec(p, "GET", 200) for p in paths))
    )

    assert client.max_in_flight == len(paths)


@pytest.mark.asyncio
async def test_cancelling_dispatch_cancels_in_flight_probes():
    client = StubHttpClient(
        {f"{BASE}/a": ok(200), f"{BASE}/b": ok(200)},
        delays={f"{BASE}/a": 30.0, f"{BASE}/b": 30.0},
    )
    task = asyncio.create_task(
        ProbeDispatcher(client, ProbeSettings()).dispatch(
            target(EndpointSpec("/a", "GET", 200), EndpointSpec("/b", "GET", 200))
        )
    )
    while client.in_flight < 2:
        await asyncio.sleep(0.01)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert client.in_flight == 0
    assert client.completed == []


@pytest.mark.asyncio
async def test_each_run_gets_a_fresh_request_id():
    client = StubHttpClient({f"{BASE}/a": ok(200)})
    dispatcher = ProbeDispatcher(client, ProbeSettings())
    first = await dispatcher.dispatch(target(EndpointSpec("/a", "GET", 200)))
    second = await dispatcher.dispatch(target(EndpointSpec("/a", "GET", 200)))

    assert first.request_id.startswith(f"{REQUEST_ID_PREFIX}-")
    assert first.request_id != second.request_id


@pytest.mark.asyncio
async def test_result_serializes_to_wire_shape():
    client = StubHttpClient({f"{BASE}/a": ok(200), f"{BASE}/b": ok(500)})
    result = await ProbeDispatcher(client, ProbeSettings()).dispatch(
        target(EndpointSpec("/a", "GET", 200), EndpointSpec("/b", "GET", 200))
    )
    payload = result.to_dict()

    assert set(payload) == {"request_id", "base_url", "status", "results"}
    assert payload["status"] == "FAIL"
    assert payload["results"][1] == {"path": "/b", "expected_status": 200, "actual_status": 500, "status": "FAIL"}
