"""Store-level guard against overlapping active bookings (PostgreSQL only).

Other backends rely on the locked check in ``apps.bookings.services``.
"""

from django.db import migrations

CONSTRAINT_NAME = "booking_no_overlapping_active_stays"

EXTENSION_SQL = "CREATE EXTENSION IF NOT EXISTS btree_gist;"

CREATE_SQL = f"""
ALTER TABLE bookings_booking
    ADD CONSTRAINT {CONSTRAINT_NAME}
    EXCLUDE USING gist (
        property_id WITH =,
        tstzrange(check_in, check_out, '[]') WITH &&
    )
    WHERE (status IN ('pending', 'confirmed'));
"""

DROP_SQL = f"ALTER TABLE bookings_booking DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME};"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(EXTENSION_SQL)
    schema_editor.execute(CREATE_SQL)


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(DROP_SQL)


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
