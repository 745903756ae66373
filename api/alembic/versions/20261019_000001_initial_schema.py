"""initial schema: leagues, teams, matches, ad campaigns, creatives, events

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Create the core sports and advertising tables."""
    op.create_table(
        'leagues',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('name_en', sa.String(length=200), nullable=False),
        sa.Column('name_am', sa.String(length=200), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leagues_slug', 'leagues', ['slug'], unique=True)

    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('name_en', sa.String(length=200), nullable=False),
        sa.Column('name_am', sa.String(length=200), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_teams_slug', 'teams', ['slug'], unique=True)

    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('league_id', sa.Integer(), nullable=True),
        sa.Column('home_team_id', sa.Integer(), nullable=False),
        sa.Column('away_team_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default=sa.text("'scheduled'")),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.text('false')),

        # Score
        sa.Column('score_home', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('score_away', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('penalty_score_home', sa.Integer(), nullable=True),
        sa.Column('penalty_score_away', sa.Integer(), nullable=True),

        # Clock
        sa.Column('minute', sa.Integer(), nullable=True, server_default=sa.text('0')),
        sa.Column('first_half_injury_time', sa.Integer(), nullable=True),
        sa.Column('second_half_injury_time', sa.Integer(), nullable=True),
        sa.Column('match_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('first_half_ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('second_half_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('second_half_ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('extra_time_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('extra_time_ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('penalties_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('match_ended_at', sa.DateTime(timezone=True), nullable=True),

        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['league_id'], ['leagues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['home_team_id'], ['teams.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['away_team_id'], ['teams.id'], ondelete='RESTRICT'),
    )
    op.create_index('ix_matches_league_id', 'matches', ['league_id'])
    op.create_index('idx_matches_status_date', 'matches', ['status', 'date'])

    op.create_table(
        'ad_campaigns',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('advertiser', sa.String(length=200), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('priority', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('click_url', sa.String(length=1000), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'ad_images',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('campaign_id', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('image_url_large', sa.String(length=1000), nullable=True),
        sa.Column('image_url_small', sa.String(length=1000), nullable=True),
        sa.Column('alt_text_en', sa.String(length=300), nullable=True),
        sa.Column('alt_text_am', sa.String(length=300), nullable=True),
        sa.Column('link_url', sa.String(length=1000), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('target_pages', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[\"home\"]'::jsonb")),
        sa.Column('size_type', sa.String(length=20), nullable=True, server_default=sa.text("'full'")),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['campaign_id'], ['ad_campaigns.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_ad_images_campaign_id', 'ad_images', ['campaign_id'])
    op.create_index('idx_ad_images_active_order', 'ad_images', ['is_active', 'display_order'])

    op.create_table(
        'ad_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ad_image_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(length=20), nullable=False),
        sa.Column('page_url', sa.String(length=1000), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['ad_image_id'], ['ad_images.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_ad_events_ad_image_id', 'ad_events', ['ad_image_id'])


def downgrade() -> None:
    """Drop everything created above."""
    op.drop_index('ix_ad_events_ad_image_id', table_name='ad_events')
    op.drop_table('ad_events')
    op.drop_index('idx_ad_images_active_order', table_name='ad_images')
    op.drop_index('ix_ad_images_campaign_id', table_name='ad_images')
    op.drop_table('ad_images')
    op.drop_table('ad_campaigns')
    op.drop_index('idx_matches_status_date', table_name='matches')
    op.drop_index('ix_matches_league_id', table_name='matches')
    op.drop_table('matches')
    op.drop_index('ix_teams_slug', table_name='teams')
    op.drop_table('teams')
    op.drop_index('ix_leagues_slug', table_name='leagues')
    op.drop_table('leagues')
