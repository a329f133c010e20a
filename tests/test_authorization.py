"""Tenant isolation: access to a row succeeds iff the user is a member of its organization."""
import pytest

from db import get_db
from db.authz import ActingUser, Authorizer
from db.exceptions import AuthorizationError, ValidationError
from db.repositories import analytics as analytics_repo
from db.repositories import campaign_influencers as links_repo
from db.repositories import campaigns as campaigns_repo
from db.repositories import content as content_repo
from db.repositories import influencers as influencers_repo
from db.repositories import memberships as memberships_repo


async def _seed(actor):
    async with get_db(actor.user_id) as session:
        campaign = await campaigns_repo.create(session, actor, {"name": "Launch"})
        influencer = await influencers_repo.create(session, actor, {"name": "Alice"})
        link = await links_repo.create(session, actor, {
            "campaign_id": campaign.id, "influencer_id": influencer.id,
        })
        item = await content_repo.create(session, actor, {
            "campaign_influencer_id": link.id, "platform": "youtube", "content_type": "video",
        })
    return {"campaign": campaign, "influencer": influencer, "link": link, "content": item}


@pytest.mark.asyncio
async def test_can_access_iff_membership_exists(tenant_factory, signup_factory):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    outsider = await signup_factory("Outsider")

    async with get_db() as session:
        authorizer = Authorizer(session)
        assert await authorizer.can_access(acme.user_id, acme.organization_id) is True
        assert await authorizer.can_access(acme.user_id, globex.organization_id) is False
        assert await authorizer.can_access(outsider, acme.organization_id) is False
        assert await authorizer.can_access(acme.user_id, None) is False


@pytest.mark.asyncio
@pytest.mark.parametrize("repo,key", [
    (campaigns_repo, "campaign"),
    (influencers_repo, "influencer"),
    (links_repo, "link"),
    (content_repo, "content"),
])
async def test_cross_tenant_reads_are_denied(tenant_factory, repo, key):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    rows = await _seed(acme)

    async with get_db(acme.user_id) as session:
        assert (await repo.get(session, acme, rows[key].id)).id == rows[key].id

    with pytest.raises(AuthorizationError):
        async with get_db(globex.user_id) as session:
            await repo.get(session, globex, rows[key].id)


@pytest.mark.asyncio
async def test_cross_tenant_writes_are_denied(tenant_factory):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    rows = await _seed(acme)

    with pytest.raises(AuthorizationError):
        async with get_db(globex.user_id) as session:
            await influencers_repo.update(session, globex, rows["influencer"].id, {"name": "Hijacked"})

    with pytest.raises(AuthorizationError):
        async with get_db(globex.user_id) as session:
            await campaigns_repo.delete(session, globex, rows["campaign"].id)

    with pytest.raises(AuthorizationError):
        async with get_db(globex.user_id) as session:
            await influencers_repo.create(session, globex, {
                "name": "Planted", "organization_id": acme.organization_id,
            })

    async with get_db(acme.user_id) as session:
        influencer = await influencers_repo.get(session, acme, rows["influencer"].id)
        assert influencer.name == "Alice"
        assert len(await campaigns_repo.list_campaigns(session, acme)) == 1
        assert len(await influencers_repo.list_influencers(session, acme)) == 1


@pytest.mark.asyncio
async def test_cannot_link_across_organizations(tenant_factory):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    acme_rows = await _seed(acme)
    globex_rows = await _seed(globex)

    with pytest.raises(AuthorizationError):
        async with get_db(acme.user_id) as session:
            await links_repo.create(session, acme, {
                "campaign_id": acme_rows["campaign"].id,
                "influencer_id": globex_rows["influencer"].id,
            })


@pytest.mark.asyncio
async def test_member_of_both_cannot_mix_organizations(tenant_factory):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    async with get_db(globex.user_id) as session:
        await memberships_repo.add_member(
            session, globex, globex.organization_id, acme.user_id, "member"
        )
    acme_rows = await _seed(acme)
    globex_rows = await _seed(globex)

    with pytest.raises(ValidationError):
        async with get_db(acme.user_id) as session:
            await links_repo.create(session, acme, {
                "campaign_id": acme_rows["campaign"].id,
                "influencer_id": globex_rows["influencer"].id,
            })


@pytest.mark.asyncio
async def test_lists_are_scoped_to_current_organization(tenant_factory):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    await _seed(acme)
    await _seed(globex)

    async with get_db(acme.user_id) as session:
        campaigns = await campaigns_repo.list_campaigns(session, acme)
        links = await links_repo.list_links(session, acme)
        content = await content_repo.list_content(session, acme)
    assert {c.organization_id for c in campaigns} == {acme.organization_id}
    assert len(links) == 1
    assert len(content) == 1


@pytest.mark.asyncio
async def test_listing_another_organization_is_denied(tenant_factory):
    acme = await tenant_factory("Acme")
    globex = await tenant_factory("Globex")
    spoofed = ActingUser(user_id=globex.user_id, organization_id=acme.organization_id)

    with pytest.raises(AuthorizationError):
        async with get_db(globex.user_id) as session:
            await influencers_repo.list_influencers(session, spoofed)

    with pytest.raises(AuthorizationError):
        async with get_db(globex.user_id) as session:
            await analytics_repo.dashboard_summary(session, spoofed)


@pytest.mark.asyncio
async def test_actor_without_organization_is_denied(signup_factory):
    user_id = await signup_factory("Newcomer")

    with pytest.raises(AuthorizationError):
        async with get_db(user_id) as session:
            await campaigns_repo.create(session, ActingUser(user_id=user_id), {"name": "Nope"})
