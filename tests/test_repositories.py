"""Integration tests for the entity repositories."""
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from db import get_db
from db.exceptions import ConflictError, NotFoundError, ValidationError
from db.models import CampaignInfluencer, Content
from db.repositories import campaign_influencers as links_repo
from db.repositories import campaigns as campaigns_repo
from db.repositories import content as content_repo
from db.repositories import influencers as influencers_repo


INFLUENCER_PAYLOAD = {
    "name": "Alice Adeyemi",
    "email": "alice@example.com",
    "phone": "+234 800 000 0000",
    "social_handles": {"instagram": "@alice", "tiktok": "@alice.a"},
    "categories": ["fashion", "lifestyle"],
    "audience_demographics": {"age_18_24": 0.41, "top_city": "Lagos"},
    "notes": "Prefers email contact",
}


async def _campaign_with_link(actor, name="Spring launch"):
    async with get_db(actor.user_id) as session:
        campaign = await campaigns_repo.create(session, actor, {"name": name, "status": "active"})
        influencer = await influencers_repo.create(session, actor, {"name": f"{name} creator"})
        link = await links_repo.create(session, actor, {
            "campaign_id": campaign.id,
            "influencer_id": influencer.id,
        })
        item = await content_repo.create(session, actor, {
            "campaign_influencer_id": link.id,
            "platform": "instagram",
            "content_type": "reel",
        })
    return campaign, influencer, link, item


async def _count(model, **filters) -> int:
    async with get_db() as session:
        stmt = select(func.count()).select_from(model)
        for column, value in filters.items():
            stmt = stmt.where(getattr(model, column) == value)
        return (await session.execute(stmt)).scalar_one()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_influencer_round_trip(tenant_factory):
    """Reading an influencer back yields the payload plus id and timestamps."""
    actor = await tenant_factory()
    async with get_db(actor.user_id) as session:
        created = await influencers_repo.create(session, actor, INFLUENCER_PAYLOAD)

    async with get_db(actor.user_id) as session:
        fetched = await influencers_repo.get(session, actor, created.id)

    for key, value in INFLUENCER_PAYLOAD.items():
        assert getattr(fetched, key) == value, key
    assert fetched.id == created.id
    assert fetched.organization_id == actor.organization_id
    assert fetched.created_at is not None
    assert fetched.updated_at is not None


LATER = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_updates_stamp_updated_at(tenant_factory, monkeypatch):
    """Every update path writes a fresh updated_at and leaves created_at alone."""
    actor = await tenant_factory()
    campaign, influencer, link, item = await _campaign_with_link(actor)
    monkeypatch.setattr("db.repositories.common.utcnow", lambda: LATER)

    async with get_db(actor.user_id) as session:
        updated_influencer = await influencers_repo.update(
            session, actor, influencer.id, {"notes": "Met at conference"}
        )
        updated_campaign = await campaigns_repo.update_status(session, actor, campaign.id, "paused")
        updated_link = await links_repo.update(session, actor, link.id, {"notes": "Signed"})
        updated_item = await content_repo.update(session, actor, item.id, {"caption": "Hello"})

    assert updated_influencer.notes == "Met at conference"
    assert updated_influencer.name == influencer.name
    for before, after in (
        (influencer, updated_influencer),
        (campaign, updated_campaign),
        (link, updated_link),
        (item, updated_item),
    ):
        assert after.updated_at == LATER
        assert after.created_at == before.created_at
        assert after.created_at < LATER

    async with get_db(actor.user_id) as session:
        reread = await links_repo.get(session, actor, link.id)
    assert reread.updated_at == LATER


@pytest.mark.asyncio
async def test_duplicate_campaign_influencer_pair_conflicts(tenant_factory):
    """Linking the same influencer to the same campaign twice raises ConflictError."""
    actor = await tenant_factory()
    campaign, influencer, _, _ = await _campaign_with_link(actor)

    with pytest.raises(ConflictError):
        async with get_db(actor.user_id) as session:
            await links_repo.create(session, actor, {
                "campaign_id": campaign.id,
                "influencer_id": influencer.id,
                "status": "negotiating",
            })

    assert await _count(CampaignInfluencer, campaign_id=campaign.id) == 1


@pytest.mark.asyncio
async def test_deleting_campaign_cascades_to_links_and_content(tenant_factory):
    actor = await tenant_factory()
    campaign, influencer, link, _ = await _campaign_with_link(actor)
    other_campaign, _, other_link, _ = await _campaign_with_link(actor, "Other")

    async with get_db(actor.user_id) as session:
        await campaigns_repo.delete(session, actor, campaign.id)

    assert await _count(CampaignInfluencer, campaign_id=campaign.id) == 0
    assert await _count(Content, campaign_influencer_id=link.id) == 0
    # Unrelated campaign untouched; the influencer itself survives
    assert await _count(Content, campaign_influencer_id=other_link.id) == 1
    async with get_db(actor.user_id) as session:
        assert (await influencers_repo.get(session, actor, influencer.id)).id == influencer.id
        with pytest.raises(NotFoundError):
            await campaigns_repo.get(session, actor, campaign.id)


@pytest.mark.asyncio
async def test_deleting_influencer_cascades_to_links_and_content(tenant_factory):
    actor = await tenant_factory()
    campaign, influencer, link, _ = await _campaign_with_link(actor)

    async with get_db(actor.user_id) as session:
        await influencers_repo.delete(session, actor, influencer.id)

    assert await _count(CampaignInfluencer, influencer_id=influencer.id) == 0
    assert await _count(Content, campaign_influencer_id=link.id) == 0
    async with get_db(actor.user_id) as session:
        assert (await campaigns_repo.get(session, actor, campaign.id)).id == campaign.id


@pytest.mark.asyncio
async def test_link_requires_existing_campaign(tenant_factory):
    actor = await tenant_factory()
    async with get_db(actor.user_id) as session:
        influencer = await influencers_repo.create(session, actor, {"name": "Carol"})

    with pytest.raises(NotFoundError):
        async with get_db(actor.user_id) as session:
            await links_repo.create(session, actor, {
                "campaign_id": uuid.uuid4(),
                "influencer_id": influencer.id,
            })


@pytest.mark.asyncio
async def test_campaign_date_range_checked_on_update(tenant_factory):
    actor = await tenant_factory()
    async with get_db(actor.user_id) as session:
        campaign = await campaigns_repo.create(session, actor, {
            "name": "Summer",
            "start_date": date(2026, 6, 1),
            "end_date": date(2026, 8, 31),
            "budget": "12500.50",
        })
    assert campaign.budget == Decimal("12500.50")

    with pytest.raises(ValidationError):
        async with get_db(actor.user_id) as session:
            await campaigns_repo.update(session, actor, campaign.id, {"end_date": date(2026, 5, 1)})

    async with get_db(actor.user_id) as session:
        unchanged = await campaigns_repo.get(session, actor, campaign.id)
    assert unchanged.end_date == date(2026, 8, 31)


@pytest.mark.asyncio
async def test_list_campaigns_by_status(tenant_factory):
    actor = await tenant_factory()
    async with get_db(actor.user_id) as session:
        await campaigns_repo.create(session, actor, {"name": "Draft one"})
        live = await campaigns_repo.create(session, actor, {"name": "Live one"})
        await campaigns_repo.update_status(session, actor, live.id, "active")

    async with get_db(actor.user_id) as session:
        active = await campaigns_repo.list_campaigns(session, actor, status="active")
        everything = await campaigns_repo.list_campaigns(session, actor)
    assert [c.name for c in active] == ["Live one"]
    assert len(everything) == 2


@pytest.mark.asyncio
async def test_list_influencers_by_category(tenant_factory):
    actor = await tenant_factory()
    async with get_db(actor.user_id) as session:
        await influencers_repo.create(session, actor, {"name": "Dee", "categories": ["Beauty"]})
        await influencers_repo.create(session, actor, {"name": "Eve", "categories": ["gaming"]})

    async with get_db(actor.user_id) as session:
        beauty = await influencers_repo.list_influencers(session, actor, category="beauty")
    assert [i.name for i in beauty] == ["Dee"]


@pytest.mark.asyncio
async def test_content_calendar_window(tenant_factory):
    actor = await tenant_factory()
    _, _, link, _ = await _campaign_with_link(actor)
    start = datetime(2026, 11, 1, tzinfo=timezone.utc)

    async with get_db(actor.user_id) as session:
        for days, status in ((3, "scheduled"), (20, "scheduled"), (45, "scheduled"), (5, "archived")):
            await content_repo.create(session, actor, {
                "campaign_influencer_id": link.id,
                "platform": "tiktok",
                "content_type": "video",
                "scheduled_at": start + timedelta(days=days),
                "status": status,
            })

    async with get_db(actor.user_id) as session:
        calendar = await content_repo.get_calendar(session, actor, start=start, months=1)
    assert len(calendar) == 2
    assert all(item.status == "scheduled" for item in calendar)
    assert calendar[0].scheduled_at <= calendar[1].scheduled_at


@pytest.mark.asyncio
async def test_mark_published_and_record_metrics(tenant_factory):
    actor = await tenant_factory()
    _, _, _, item = await _campaign_with_link(actor)

    async with get_db(actor.user_id) as session:
        published = await content_repo.mark_published(
            session, actor, item.id, url="https://instagram.com/p/abc"
        )
        await content_repo.record_metrics(session, actor, item.id, {"views": 1000})
        merged = await content_repo.record_metrics(session, actor, item.id, {"likes": 90})

    assert published.status == "published"
    assert published.published_at is not None
    assert merged.metrics == {"views": 1000, "likes": 90}


@pytest.mark.asyncio
async def test_influencer_round_trip_keeps_mixed_case(tenant_factory):
    actor = await tenant_factory()
    payload = {
        "name": "Alice",
        "email": "Alice@Example.COM",
        "categories": ["Fashion", "Lifestyle"],
    }
    async with get_db(actor.user_id) as session:
        created = await influencers_repo.create(session, actor, payload)

    async with get_db(actor.user_id) as session:
        fetched = await influencers_repo.get(session, actor, created.id)
        by_tag = await influencers_repo.list_influencers(session, actor, category="fashion")

    assert fetched.email == "Alice@Example.COM"
    assert fetched.categories == ["Fashion", "Lifestyle"]
    assert [i.id for i in by_tag] == [created.id]


@pytest.mark.asyncio
async def test_rows_removed_by_cascade_are_not_found_in_same_session(tenant_factory):
    actor = await tenant_factory()
    with pytest.raises(NotFoundError):
        async with get_db(actor.user_id) as session:
            campaign = await campaigns_repo.create(session, actor, {"name": "Short lived"})
            influencer = await influencers_repo.create(session, actor, {"name": "Frank"})
            link = await links_repo.create(session, actor, {
                "campaign_id": campaign.id, "influencer_id": influencer.id,
            })
            item = await content_repo.create(session, actor, {
                "campaign_influencer_id": link.id, "platform": "youtube", "content_type": "video",
            })
            await campaigns_repo.delete(session, actor, campaign.id)
            with pytest.raises(NotFoundError):
                await links_repo.get(session, actor, link.id)
            await content_repo.get(session, actor, item.id)
