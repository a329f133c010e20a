"""Repository layer (the query/command facade) for the campaign dashboard.

Every tenant-scoped function takes an ActingUser and checks membership
before touching a row:
- profiles: ensure_profile, get_profile, set_current_organization, acting_user
- organizations: create, get, update, delete, list_for_user
- memberships: add_member, update_role, remove_member, list_members, get_role
- influencers: create, get, update, delete, list_influencers
- campaigns: create, get, update, update_status, delete, list_campaigns
- campaign_influencers: create, get, update, update_status, delete, list_links
- content: create, get, update, mark_published, record_metrics, delete,
           list_content, get_calendar
- analytics: dashboard_summary
"""
