from __future__ import annotations

import argparse
import json
import os
import shlex
import sys
import urllib.error
import urllib.request
from typing import Any

from pydantic import TypeAdapter

from devsel.core import DeviceDescriptor, EnvironmentAssignment, SelectorRequest
from devsel.logging_setup import setup_logging
from devsel.services.capabilities import build_backend_list
from devsel.services.selectors import visible_devices_env

DEFAULT_BASE_URL = os.getenv("DEVSEL_BASE_URL", "http://127.0.0.1:8686")

_DEVICE_LIST = TypeAdapter(list[DeviceDescriptor])


def _join_url(base_url: str, path: str) -> str:
    base = base_url.rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return base + path


def _request(base_url: str, method: str, path: str, timeout: float, payload: dict[str, Any] | None = None) -> Any:
    url = _join_url(base_url, path)
    headers = {"Accept": "application/json"}
    body: bytes | None = None
    if payload is not None:
        headers["Content-Type"] = "application/json"
        body = json.dumps(payload, ensure_ascii=True).encode("utf-8")
    req = urllib.request.Request(url=url, method=method, headers=headers, data=body)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read()
            if not raw:
                return {"ok": True}
            content_type = resp.headers.get("Content-Type", "")
            if "application/json" in content_type:
                return json.loads(raw.decode("utf-8"))
            return {"text": raw.decode("utf-8")}
    except urllib.error.HTTPError as exc:
        detail = exc.reason
        try:
            payload = json.loads(exc.read().decode("utf-8"))
            if isinstance(payload, dict):
                detail = payload.get("detail") or payload
            else:
                detail = payload
        except ValueError:
            pass
        raise RuntimeError(f"HTTP {exc.code}: {detail}") from exc
    except urllib.error.URLError as exc:
        raise RuntimeError(f"request failed: {exc.reason}") from exc


def _print(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _read_request(source: str) -> SelectorRequest:
    if source == "-":
        raw = sys.stdin.read()
    else:
        with open(source, "r", encoding="utf-8") as f:
            raw = f.read()
    try:
        value = json.loads(raw) if raw.strip() else []
    except json.JSONDecodeError as exc:
        raise ValueError(f"devices must be valid JSON: {exc.msg}") from exc
    # Accept both a bare array and the API request shape.
    if isinstance(value, dict):
        if "devices" not in value:
            raise ValueError("devices object must have a 'devices' key")
        return SelectorRequest.model_validate(value)
    return SelectorRequest(devices=_DEVICE_LIST.validate_python(value))


def _format_assignment(assignment: EnvironmentAssignment, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(assignment.model_dump(), ensure_ascii=False)
    if fmt == "export":
        return f"export {assignment.name}={shlex.quote(assignment.value)}"
    return assignment.render()


def _cmd_env(args: argparse.Namespace) -> None:
    req = _read_request(args.devices)
    devices = req.devices
    backend = args.backend or req.backend
    if args.remote:
        payload = {
            "devices": [device.model_dump() for device in devices],
            "backend": backend,
        }
        result = _request(args.base_url, "POST", "/api/v1/selectors/env", args.timeout, payload)
        assignment = EnvironmentAssignment.model_validate(result)
    else:
        assignment = visible_devices_env(devices, backend=backend or (None if devices else args.default_backend))
    if assignment is not None:
        print(_format_assignment(assignment, args.format))


def _cmd_backends(args: argparse.Namespace) -> None:
    if args.remote:
        _print(_request(args.base_url, "GET", "/api/v1/system/backends", args.timeout))
    else:
        _print(build_backend_list().model_dump())


def _cmd_health(args: argparse.Namespace) -> None:
    _print(_request(args.base_url, "GET", "/healthz", args.timeout))


def _cmd_serve(args: argparse.Namespace) -> None:
    from devsel.app.main import serve
    from devsel.app.settings import load_settings

    serve(load_settings(), host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="devsel CLI")
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help="API base URL, default from DEVSEL_BASE_URL or http://127.0.0.1:8686",
    )
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds")
    parser.add_argument(
        "--log-level",
        default=os.getenv("DEVSEL_LOG_LEVEL", "WARNING"),
        help="Logging level, use DEBUG to see skipped devices",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_env = sub.add_parser("env", help="Print the device selector variable for a device list")
    p_env.add_argument("--devices", default="-", help="JSON file with device descriptors, '-' for stdin")
    p_env.add_argument("--backend", default=None, help="Target backend family, default is the first device's")
    p_env.add_argument(
        "--default-backend",
        default=os.getenv("DEVSEL_DEFAULT_BACKEND", "sycl"),
        help="Backend used when the device list is empty",
    )
    p_env.add_argument("--format", default="shell", choices=["shell", "export", "json"])
    p_env.add_argument("--remote", action="store_true", help="Ask a running devsel service instead")
    p_env.set_defaults(func=_cmd_env)

    p_backends = sub.add_parser("backends", help="List supported backends")
    p_backends.add_argument("--remote", action="store_true", help="Ask a running devsel service instead")
    p_backends.set_defaults(func=_cmd_backends)

    p_health = sub.add_parser("health", help="Check service health")
    p_health.set_defaults(func=_cmd_health)

    p_serve = sub.add_parser("serve", help="Start local devsel API service")
    p_serve.add_argument("--host", default=None, help="Bind host, default from settings/env")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port, default from settings/env")
    p_serve.add_argument("--reload", action="store_true", help="Enable auto-reload")
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, stream=sys.stderr)
    try:
        args.func(args)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
