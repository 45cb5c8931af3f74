import pytest

from apps.masjids.services import ensure_can_edit, normalize_fields, normalize_string, NotRecordOwnerError


class TestNormalizeString:

    @pytest.mark.parametrize('value, expected', [
        ('  Leeds ', 'Leeds'),
        ('   ', ''),
        ('', ''),
        (None, ''),
    ])
    def test_values(self, value, expected):
        assert normalize_string(value) == expected

    def test_only_listed_fields(self):
        data = normalize_fields({'name': ' A ', 'status': ' ACTIVE '}, ['name', 'city'])

        assert data == {'name': 'A', 'status': ' ACTIVE '}


@pytest.mark.django_db
class TestEnsureCanEdit:

    def test_owner(self, masjid, staff_user):
        ensure_can_edit(masjid, staff_user)

    def test_admin(self, masjid, admin_user):
        ensure_can_edit(masjid, admin_user)

    def test_other_staff(self, masjid, other_staff_user):
        with pytest.raises(NotRecordOwnerError):
            ensure_can_edit(masjid, other_staff_user)
