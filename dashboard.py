"""Influencer Campaign Dashboard — command-line front end.

Thin stand-in for the dashboard screens: every command opens one session,
calls the repository facade as the acting user and prints the result
through the data table.

Usage:
  # First login creates the profile
  python dashboard.py signup --user-id <uuid> --email jane@acme.com --name "Jane Doe"

  # Create an organization (becomes the current one)
  python dashboard.py --user-id <uuid> org-create --name "Acme Marketing"

  # Invite a colleague who has already signed up
  python dashboard.py --user-id <uuid> invite --member-id <uuid> --role admin

  # Influencers and campaigns
  python dashboard.py --user-id <uuid> influencers add --name "Alice" --category fashion
  python dashboard.py --user-id <uuid> influencers list --search lagos
  python dashboard.py --user-id <uuid> campaigns add --name "Spring launch" --budget 5000
  python dashboard.py --user-id <uuid> campaigns list --status active

  # Content calendar and overview
  python dashboard.py --user-id <uuid> calendar --months 2
  python dashboard.py --user-id <uuid> summary
"""
import argparse
import asyncio
import logging
import os
import sys
import uuid

import db.repositories.analytics as analytics_repo
import db.repositories.campaigns as campaign_repo
import db.repositories.content as content_repo
import db.repositories.influencers as influencer_repo
import db.repositories.memberships as membership_repo
import db.repositories.organizations as org_repo
import db.repositories.profiles as profile_repo
from db.connection import dispose_engine, get_db
from db.exceptions import DashboardError
from db.repositories.common import current_organization
from views.data_table import Column, DataTable

logger = logging.getLogger(__name__)

INFLUENCER_COLUMNS = [
    Column("Name", "name"),
    Column("Email", "email"),
    Column("Handles", "social_handles"),
    Column("Categories", "categories"),
]

CAMPAIGN_COLUMNS = [
    Column("Name", "name"),
    Column("Status", "status"),
    Column("Start", "start_date"),
    Column("End", "end_date"),
    Column("Budget", "budget", render=lambda value, row: "" if value is None else f"{value:,.2f}"),
]

CALENDAR_COLUMNS = [
    Column("Scheduled", "scheduled_at"),
    Column("Platform", "platform"),
    Column("Type", "content_type"),
    Column("Status", "status"),
    Column("URL", "url"),
]


async def signup(user_id: uuid.UUID, email: str, full_name: str = "") -> None:
    async with get_db(user_id) as session:
        profile = await profile_repo.ensure_profile(session, user_id, email, full_name or None)
    print(f"  Profile ready for {profile.email} ({profile.id})")


async def create_organization(user_id: uuid.UUID, name: str, logo_url: str = "") -> None:
    async with get_db(user_id) as session:
        org = await org_repo.create(session, user_id, {"name": name, "logo_url": logo_url or None})
    print(f"  Created organization {org.name} ({org.id})")


async def invite(user_id: uuid.UUID, member_id: uuid.UUID, role: str) -> None:
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        membership = await membership_repo.add_member(
            session, actor, current_organization(actor), member_id, role
        )
    print(f"  Added {membership.user_id} as {membership.role}")


async def list_influencers(user_id: uuid.UUID, search: str = "", category: str = "") -> None:
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        rows = await influencer_repo.list_influencers(session, actor, category=category or None)
    print(DataTable(rows, INFLUENCER_COLUMNS, search=search).to_text())


async def add_influencer(
    user_id: uuid.UUID, name: str, email: str = "", handles=None, categories=None
) -> None:
    social_handles = {}
    for handle in handles or []:
        platform, _, value = handle.partition("=")
        social_handles[platform.strip()] = value.strip()
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        influencer = await influencer_repo.create(session, actor, {
            "name": name,
            "email": email or None,
            "social_handles": social_handles,
            "categories": categories or [],
        })
    print(f"  Created influencer {influencer.name} ({influencer.id})")


async def list_campaigns(user_id: uuid.UUID, search: str = "", status: str = "") -> None:
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        rows = await campaign_repo.list_campaigns(session, actor, status=status or None)
    print(DataTable(rows, CAMPAIGN_COLUMNS, search=search).to_text())


async def add_campaign(
    user_id: uuid.UUID,
    name: str,
    description: str = "",
    start: str = "",
    end: str = "",
    budget: str = "",
    status: str = "draft",
) -> None:
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        campaign = await campaign_repo.create(session, actor, {
            "name": name,
            "description": description or None,
            "start_date": start or None,
            "end_date": end or None,
            "budget": budget or None,
            "status": status,
        })
    print(f"  Created campaign {campaign.name} ({campaign.id}) [{campaign.status}]")


async def show_calendar(user_id: uuid.UUID, months: int = 1, search: str = "") -> None:
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        rows = await content_repo.get_calendar(session, actor, months=months)
    print(DataTable(rows, CALENDAR_COLUMNS, search=search).to_text("Nothing scheduled."))


async def show_summary(user_id: uuid.UUID) -> None:
    async with get_db(user_id) as session:
        actor = await profile_repo.acting_user(session, user_id)
        summary = await analytics_repo.dashboard_summary(session, actor)
    print(f"  Influencers:   {summary['influencers']}")
    for section in ("campaigns", "campaign_influencers", "content"):
        counts = ", ".join(f"{k}={v}" for k, v in summary[section].items())
        print(f"  {section.replace('_', ' ').capitalize()}: {counts}")
    print(f"  Active budget: {summary['active_budget']:,.2f}")
    for key, value in sorted(summary["metrics"].items()):
        print(f"  {key}: {value}")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Influencer Campaign Dashboard"
    )
    parser.add_argument(
        "--user-id",
        type=uuid.UUID,
        default=os.environ.get("DASHBOARD_USER_ID") or None,
        help="Acting user id (default: $DASHBOARD_USER_ID)",
    )
    sub = parser.add_subparsers(dest="command")

    signup_cmd = sub.add_parser("signup", help="Create the profile for a new identity")
    signup_cmd.add_argument("--email", required=True)
    signup_cmd.add_argument("--name", default="")

    org = sub.add_parser("org-create", help="Create an organization owned by the acting user")
    org.add_argument("--name", required=True)
    org.add_argument("--logo-url", default="")

    invite_cmd = sub.add_parser("invite", help="Add a signed-up user to the current organization")
    invite_cmd.add_argument("--member-id", type=uuid.UUID, required=True)
    invite_cmd.add_argument("--role", default="member", choices=["owner", "admin", "member"])

    influencers = sub.add_parser("influencers", help="List or add influencers")
    inf_sub = influencers.add_subparsers(dest="action")
    inf_list = inf_sub.add_parser("list")
    inf_list.add_argument("--search", default="")
    inf_list.add_argument("--category", default="")
    inf_add = inf_sub.add_parser("add")
    inf_add.add_argument("--name", required=True)
    inf_add.add_argument("--email", default="")
    inf_add.add_argument("--handle", action="append", default=[], help="platform=handle, repeatable")
    inf_add.add_argument("--category", action="append", default=[], help="Category tag, repeatable")

    campaigns = sub.add_parser("campaigns", help="List or add campaigns")
    camp_sub = campaigns.add_subparsers(dest="action")
    camp_list = camp_sub.add_parser("list")
    camp_list.add_argument("--search", default="")
    camp_list.add_argument("--status", default="")
    camp_add = camp_sub.add_parser("add")
    camp_add.add_argument("--name", required=True)
    camp_add.add_argument("--description", default="")
    camp_add.add_argument("--start", default="", help="Start date YYYY-MM-DD")
    camp_add.add_argument("--end", default="", help="End date YYYY-MM-DD")
    camp_add.add_argument("--budget", default="")
    camp_add.add_argument("--status", default="draft")

    calendar = sub.add_parser("calendar", help="Show scheduled content")
    calendar.add_argument("--months", type=int, default=1)
    calendar.add_argument("--search", default="")

    sub.add_parser("summary", help="Show dashboard analytics")

    return parser


async def _dispatch(args) -> None:
    try:
        if args.command == "signup":
            await signup(args.user_id, args.email, args.name)
        elif args.command == "org-create":
            await create_organization(args.user_id, args.name, args.logo_url)
        elif args.command == "invite":
            await invite(args.user_id, args.member_id, args.role)
        elif args.command == "influencers" and args.action == "add":
            await add_influencer(args.user_id, args.name, args.email, args.handle, args.category)
        elif args.command == "influencers":
            await list_influencers(
                args.user_id, getattr(args, "search", ""), getattr(args, "category", "")
            )
        elif args.command == "campaigns" and args.action == "add":
            await add_campaign(
                args.user_id, args.name, args.description,
                args.start, args.end, args.budget, args.status,
            )
        elif args.command == "campaigns":
            await list_campaigns(
                args.user_id, getattr(args, "search", ""), getattr(args, "status", "")
            )
        elif args.command == "calendar":
            await show_calendar(args.user_id, args.months, args.search)
        elif args.command == "summary":
            await show_summary(args.user_id)
    finally:
        await dispose_engine()


def main(argv=None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1
    if args.user_id is None:
        parser.error("--user-id (or DASHBOARD_USER_ID) is required")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        asyncio.run(_dispatch(args))
    except DashboardError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
