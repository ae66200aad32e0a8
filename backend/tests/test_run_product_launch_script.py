from __future__ import annotations

import json
from datetime import datetime

import pytest

from launch.engine import DUPLICATE_PRODUCT_MESSAGE
from launch.schemas import LaunchRequest
from scripts import run_product_launch


def _parse_json_output(stdout: str) -> dict:
    lines = [line for line in stdout.splitlines() if line.strip()]
    start = next(i for i in range(len(lines) - 1, -1, -1) if lines[i].startswith("{"))
    return json.loads("\n".join(lines[start:]))


def test_build_demo_request_is_valid():
    launch_date = datetime(2026, 12, 1)
    payload = run_product_launch.build_demo_request(user_id=2, launch_date=launch_date)

    request = LaunchRequest.model_validate(payload)
    assert request.product_id == 0
    assert request.user_id == 2
    assert request.launch_date == launch_date
    assert len(request.marketing_campaigns) == 1


@pytest.mark.asyncio
async def test_run_launch_twice_reports_duplicate(tmp_path):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'launch.db'}"
    request = LaunchRequest.model_validate(run_product_launch.build_demo_request(user_id=1))

    first = await run_product_launch.run_launch(request, 1, database_url, seed=True)
    assert first.success is True
    assert first.product.id == 4
    assert first.campaign_ids == [1]

    second = await run_product_launch.run_launch(request, 1, database_url)
    assert second.success is False
    assert second.error_message == DUPLICATE_PRODUCT_MESSAGE


@pytest.mark.asyncio
async def test_run_launch_unknown_user(tmp_path):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'launch.db'}"
    request = LaunchRequest.model_validate(run_product_launch.build_demo_request(user_id=1))

    with pytest.raises(ValueError, match="User 9 not found"):
        await run_product_launch.run_launch(request, 9, database_url, seed=True)


def test_main_demo_prints_result(capsys):
    exit_code = run_product_launch.main(["--demo"])

    assert exit_code == 0
    payload = _parse_json_output(capsys.readouterr().out)
    assert payload["success"] is True
    assert payload["product"]["name"] == "Noise Cancelling Headphones"
    assert payload["product"]["price"] == "189.00"


def test_main_requires_request_without_demo():
    with pytest.raises(SystemExit):
        run_product_launch.main([])
