#!/usr/bin/env python3

from __future__ import annotations

import argparse
import base64
import json
import sys
from dataclasses import dataclass
from typing import Optional

from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str = ""


def _http_request(
    method: str,
    url: str,
    *,
    body: Optional[bytes] = None,
    timeout_sec: float = 20.0,
) -> tuple[int, bytes]:
    headers = {"content-type": "application/json"} if body is not None else {}
    request = Request(url=url, data=body, headers=headers, method=method.upper())

    try:
        with urlopen(request, timeout=timeout_sec) as resp:
            return int(getattr(resp, "status", resp.getcode())), resp.read()
    except HTTPError as e:
        try:
            data = e.read()
        except Exception:
            data = b""
        return int(getattr(e, "code", 0) or 0), data
    except URLError as e:
        raise RuntimeError(f"{type(e).__name__}: {e}")


def _snippet(body: bytes) -> str:
    return body[:200].decode("utf-8", errors="replace")


def _error_field(body: bytes) -> Optional[str]:
    try:
        payload = json.loads(body.decode("utf-8"))
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return None


def _run_checks(*, endpoint: str, prompt: str, out_path: str, timeout_sec: float) -> list[CheckResult]:
    results: list[CheckResult] = []

    def check(name: str, ok: bool, detail: str = "") -> None:
        results.append(CheckResult(name=name, ok=ok, detail=detail))

    try:
        status, body = _http_request("GET", endpoint, timeout_sec=10.0)
        check("method_gate", status == 405, f"status={status}")
    except Exception as e:
        check("method_gate", False, f"{type(e).__name__}: {e}")
        return results

    try:
        status, body = _http_request("POST", endpoint, body=b'{"prompt": ""}', timeout_sec=10.0)
        check("empty_prompt", status == 400 and _error_field(body) is not None, f"status={status} body={_snippet(body)}")
    except Exception as e:
        check("empty_prompt", False, f"{type(e).__name__}: {e}")

    try:
        status, body = _http_request("POST", endpoint, body=b"not json", timeout_sec=10.0)
        check("invalid_json", status == 400, f"status={status}")
    except Exception as e:
        check("invalid_json", False, f"{type(e).__name__}: {e}")

    if not prompt:
        return results

    # Real generation: costs one provider call.
    payload = json.dumps({"prompt": prompt}).encode("utf-8")
    try:
        status, body = _http_request("POST", endpoint, body=payload, timeout_sec=timeout_sec)
    except Exception as e:
        check("generate", False, f"{type(e).__name__}: {e}")
        return results

    if status != 200:
        check("generate", False, f"status={status} error={_error_field(body) or _snippet(body)}")
        return results

    try:
        b64 = json.loads(body.decode("utf-8"))["base64Image"]
        raw = base64.b64decode(b64, validate=True)
    except Exception as e:
        check("generate", False, f"bad payload: {type(e).__name__}: {e}")
        return results

    if b64.startswith("data:"):
        check("generate", False, "base64Image still carries a data URI prefix")
        return results

    detail = f"{len(raw)} bytes"
    if out_path:
        with open(out_path, "wb") as f:
            f.write(raw)
        detail += f" -> {out_path}"
    check("generate", True, detail)
    return results


def _print_results(results: list[CheckResult]) -> int:
    width = max((len(r.name) for r in results), default=10)
    failed = [r for r in results if not r.ok]

    for r in results:
        status = "OK" if r.ok else "FAIL"
        detail = ("" if not r.detail else f" - {r.detail}")
        print(f"{r.name.ljust(width)}  {status}{detail}")

    if failed:
        print(f"\nFAILED: {len(failed)} check(s)")
        return 1
    print("\nALL OK")
    return 0


def main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(description="Smoke-test a deployed image generation endpoint.")
    p.add_argument(
        "--url",
        default="http://127.0.0.1:8000/api/generate-image",
        help="Full URL of the generate-image endpoint.",
    )
    p.add_argument(
        "--prompt",
        default="",
        help="If set, also run one real generation with this prompt (calls the provider).",
    )
    p.add_argument("--out", default="", help="Write the decoded image of the real generation here.")
    p.add_argument("--timeout", type=float, default=120.0, help="Timeout in seconds for the real generation.")
    ns = p.parse_args(argv)

    results = _run_checks(endpoint=ns.url, prompt=ns.prompt.strip(), out_path=ns.out, timeout_sec=ns.timeout)
    return _print_results(results)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
