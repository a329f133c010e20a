"""Dashboard command line: argument parsing and the command functions."""
import uuid

import pytest

import dashboard
from db import get_db
from db.exceptions import AuthorizationError, ValidationError
from db.repositories import campaigns as campaigns_repo

USER = "0b7e1a52-2f0e-4c8a-9a57-6d1f0a4e3c21"


def test_parses_global_user_id():
    args = dashboard._build_arg_parser().parse_args(["--user-id", USER, "summary"])
    assert args.user_id == uuid.UUID(USER)
    assert args.command == "summary"


def test_influencer_add_collects_repeatable_options():
    args = dashboard._build_arg_parser().parse_args([
        "--user-id", USER, "influencers", "add", "--name", "Alice",
        "--handle", "instagram=@alice", "--handle", "tiktok=@alice.a",
        "--category", "fashion", "--category", "travel",
    ])
    assert args.action == "add"
    assert args.handle == ["instagram=@alice", "tiktok=@alice.a"]
    assert args.category == ["fashion", "travel"]


def test_invite_rejects_unknown_role():
    with pytest.raises(SystemExit):
        dashboard._build_arg_parser().parse_args([
            "--user-id", USER, "invite", "--member-id", USER, "--role", "superuser",
        ])


def test_main_without_command_prints_help(capsys):
    assert dashboard.main([]) == 1
    assert "Influencer Campaign Dashboard" in capsys.readouterr().out


def test_main_requires_user_id(monkeypatch):
    monkeypatch.delenv("DASHBOARD_USER_ID", raising=False)
    with pytest.raises(SystemExit):
        dashboard.main(["summary"])


@pytest.mark.asyncio
async def test_bad_campaign_date_is_a_validation_error(tenant_factory):
    owner = await tenant_factory()
    with pytest.raises(ValidationError):
        await dashboard.add_campaign(owner.user_id, "Leap", start="2026-02-30")

    async with get_db(owner.user_id) as session:
        assert await campaigns_repo.list_campaigns(session, owner) == []


@pytest.mark.asyncio
async def test_campaign_dates_accepted_as_iso_strings(tenant_factory, capsys):
    owner = await tenant_factory()
    await dashboard.add_campaign(owner.user_id, "Spring", start="2026-03-01", end="2026-04-30")

    async with get_db(owner.user_id) as session:
        (campaign,) = await campaigns_repo.list_campaigns(session, owner)
    assert campaign.start_date.isoformat() == "2026-03-01"
    assert "Created campaign Spring" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_invite_without_organization_is_denied(signup_factory):
    loner = await signup_factory("Loner")
    colleague = await signup_factory("Colleague")
    with pytest.raises(AuthorizationError):
        await dashboard.invite(loner, colleague, "member")
