"""Row-level security: scope tenant tables to the member's organizations.

The application sets app.current_user_id per transaction (see
db.connection.get_db). Membership lookups go through SECURITY DEFINER
functions so the memberships policy does not recurse into itself. Table
owners bypass these policies, so the application role should not own the
tables in production. PostgreSQL only.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from alembic import op

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None

_CURRENT_USER = "NULLIF(current_setting('app.current_user_id', true), '')::uuid"

_FUNCTIONS = {
    "is_org_member": (
        "SELECT EXISTS (SELECT 1 FROM memberships "
        "WHERE organization_id = org_id AND user_id = " + _CURRENT_USER + ")"
    ),
    "org_has_members": (
        "SELECT EXISTS (SELECT 1 FROM memberships WHERE organization_id = org_id)"
    ),
    "campaign_org": "SELECT organization_id FROM campaigns WHERE id = org_id",
    "campaign_influencer_org": (
        "SELECT c.organization_id FROM campaign_influencers ci "
        "JOIN campaigns c ON c.id = ci.campaign_id WHERE ci.id = org_id"
    ),
}

_RETURNS = {
    "is_org_member": "boolean",
    "org_has_members": "boolean",
    "campaign_org": "uuid",
    "campaign_influencer_org": "uuid",
}

# table -> expression yielding the row's organization id
_TENANT_TABLES = {
    "organizations": "id",
    "memberships": "organization_id",
    "influencers": "organization_id",
    "campaigns": "organization_id",
    "campaign_influencers": "campaign_org(campaign_id)",
    "content": "campaign_influencer_org(campaign_influencer_id)",
}

_OWN_PROFILE = "(id = " + _CURRENT_USER + ")"

# One policy per command: WITH CHECK alone does not restrict DELETE
_PROFILE_POLICIES = (
    ("profiles_read", "SELECT", "USING (true)"),
    ("profiles_insert", "INSERT", "WITH CHECK " + _OWN_PROFILE),
    ("profiles_update", "UPDATE", "USING " + _OWN_PROFILE + " WITH CHECK " + _OWN_PROFILE),
    ("profiles_delete", "DELETE", "USING " + _OWN_PROFILE),
)


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return

    for name, body in _FUNCTIONS.items():
        op.execute(
            f"CREATE OR REPLACE FUNCTION {name}(org_id uuid) RETURNS {_RETURNS[name]} "
            f"LANGUAGE sql STABLE SECURITY DEFINER SET search_path = public "
            f"AS $$ {body} $$"
        )

    for table, org_expr in _TENANT_TABLES.items():
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY {table}_member_access ON {table} "
            f"USING (is_org_member({org_expr})) WITH CHECK (is_org_member({org_expr}))"
        )

    # A new organization has no members yet; its creator inserts the first owner row
    op.execute(
        "CREATE POLICY organizations_insert ON organizations FOR INSERT WITH CHECK (true)"
    )
    op.execute(
        "CREATE POLICY memberships_first_owner ON memberships FOR INSERT "
        "WITH CHECK (user_id = " + _CURRENT_USER + " AND role = 'owner' "
        "AND NOT org_has_members(organization_id))"
    )

    op.execute("ALTER TABLE profiles ENABLE ROW LEVEL SECURITY")
    # Profiles are readable for invites by id; only the owner may write theirs
    for name, command, clauses in _PROFILE_POLICIES:
        op.execute(f"CREATE POLICY {name} ON profiles FOR {command} {clauses}")


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return

    for name, _, _ in reversed(_PROFILE_POLICIES):
        op.execute(f"DROP POLICY IF EXISTS {name} ON profiles")
    op.execute("ALTER TABLE profiles DISABLE ROW LEVEL SECURITY")
    op.execute("DROP POLICY IF EXISTS memberships_first_owner ON memberships")
    op.execute("DROP POLICY IF EXISTS organizations_insert ON organizations")
    for table in reversed(list(_TENANT_TABLES)):
        op.execute(f"DROP POLICY IF EXISTS {table}_member_access ON {table}")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
    for name in reversed(list(_FUNCTIONS)):
        op.execute(f"DROP FUNCTION IF EXISTS {name}(uuid)")
