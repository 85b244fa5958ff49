"""Tests for ProfileService."""

from unittest.mock import MagicMock

import pytest

from modules.auth.codes import CodeIssuer
from modules.auth.exceptions import InvalidOrExpiredCodeError, RoleLockedError, UserNotFoundError
from modules.auth.identity import AppleIdentityVerifier, GoogleOAuthClient
from modules.auth.models import CodeKind
from modules.auth.policy import Capability
from modules.auth.service import AuthService
from modules.users.models import UpdateProfileRequest
from modules.users.service import ProfileService
from shared.exceptions import ConflictError, ValidationError
from shared.models import Role

from tests.conftest import make_codec, make_settings
from tests.fakes import FakeClock, InMemoryCodeRepository, InMemoryUserRepository, RecordingCodeSender

PHONE = "+15551234567"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def codes_repo():
    return InMemoryCodeRepository()


@pytest.fixture
def sender():
    return RecordingCodeSender()


@pytest.fixture
def codec():
    return make_codec()


@pytest.fixture
def service(users, codes_repo, clock, sender, codec):
    settings = make_settings()
    codes = CodeIssuer(codes_repo, clock=clock)
    auth = AuthService(
        users=users,
        codes=codes,
        sessions=codec,
        google=MagicMock(spec=GoogleOAuthClient),
        apple=MagicMock(spec=AppleIdentityVerifier),
        sender=sender,
        settings=settings,
    )
    return ProfileService(users=users, codes=codes, sender=sender, auth=auth, settings=settings)


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile(self, service, users):
        user = users.add(email="ana@example.com", name="Ana", avatar="https://cdn.example.com/a.png")

        profile = await service.get_profile(user.id)

        assert profile.id == user.id
        assert profile.image == "https://cdn.example.com/a.png"
        assert profile.role == Role.OWNER

    @pytest.mark.asyncio
    async def test_get_profile_unknown_user(self, service):
        with pytest.raises(UserNotFoundError):
            await service.get_profile("ghost")

    @pytest.mark.asyncio
    async def test_update_maps_image_to_avatar(self, service, users):
        user = users.add(email="ana@example.com", name="Ana", city="Lisbon")

        profile = await service.update_profile(
            user.id, UpdateProfileRequest(name="Ana Lee", image="https://cdn.example.com/b.png")
        )

        assert profile.name == "Ana Lee"
        assert profile.image == "https://cdn.example.com/b.png"
        assert profile.city == "Lisbon"
        assert users.rows[user.id]["avatar"] == "https://cdn.example.com/b.png"
        assert "image" not in users.rows[user.id]

    @pytest.mark.asyncio
    async def test_empty_update_is_a_read(self, service, users):
        user = users.add(email="ana@example.com", name="Ana")
        users.update = MagicMock()

        profile = await service.update_profile(user.id, UpdateProfileRequest())

        assert profile.name == "Ana"
        users.update.assert_not_called()

    def test_update_rejects_empty_name(self):
        with pytest.raises(ValueError):
            UpdateProfileRequest(name="")


class TestChooseRole:
    @pytest.mark.asyncio
    async def test_first_choice_locks_and_reissues_session(self, service, users, codec):
        user = users.add(email="ana@example.com", role_locked=False)

        grant = await service.choose_role(user.id, Role.GROOMER)

        assert grant.user.role == Role.GROOMER
        assert codec.validate(grant.token).role == Role.GROOMER
        assert users.rows[user.id]["role_locked"] is True

    @pytest.mark.asyncio
    async def test_second_choice_refused(self, service, users):
        user = users.add(email="ana@example.com", role=Role.VET.value, role_locked=True)

        with pytest.raises(RoleLockedError) as exc_info:
            await service.choose_role(user.id, Role.OWNER)
        assert exc_info.value.status_code == 403
        assert users.rows[user.id]["role"] == Role.VET.value

    @pytest.mark.asyncio
    async def test_admin_not_self_service(self, service, users):
        user = users.add(email="ana@example.com", role_locked=False)

        with pytest.raises(ValidationError):
            await service.choose_role(user.id, Role.ADMIN)
        assert users.rows[user.id]["role"] == Role.OWNER.value


class TestCapabilities:
    def test_owner(self, service):
        response = service.capabilities(Role.OWNER)

        assert response.role == Role.OWNER
        assert Capability.BOOK_SERVICES in response.capabilities
        assert Capability.MODERATE_USERS not in response.capabilities

    def test_sorted_and_complete_for_admin(self, service):
        response = service.capabilities(Role.ADMIN)

        values = [c.value for c in response.capabilities]
        assert values == sorted(values)
        assert set(response.capabilities) == set(Capability)


class TestEmailVerification:
    @pytest.mark.asyncio
    async def test_send_and_confirm(self, service, users, sender):
        user = users.add(email="ana@example.com")

        code = await service.send_email_verification(user.id)
        assert sender.sent == [("ana@example.com", code, CodeKind.EMAIL_VERIFY)]

        await service.confirm_email(user.id, code)
        assert users.get_by_id(user.id).email_verified is not None

    @pytest.mark.asyncio
    async def test_already_verified(self, service, users, clock):
        user = users.add(email="ana@example.com", email_verified=clock.now)

        with pytest.raises(ValidationError) as exc_info:
            await service.send_email_verification(user.id)
        assert exc_info.value.code == "ALREADY_VERIFIED"

    @pytest.mark.asyncio
    async def test_phone_only_account(self, service, users):
        user = users.add(phone=PHONE)

        with pytest.raises(ValidationError) as exc_info:
            await service.send_email_verification(user.id)
        assert exc_info.value.code == "NO_EMAIL"

    @pytest.mark.asyncio
    async def test_wrong_code(self, service, users):
        user = users.add(email="ana@example.com")
        code = await service.send_email_verification(user.id)
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(InvalidOrExpiredCodeError):
            await service.confirm_email(user.id, wrong)
        assert users.get_by_id(user.id).email_verified is None

    @pytest.mark.asyncio
    async def test_expired_code(self, service, users, clock):
        user = users.add(email="ana@example.com")
        code = await service.send_email_verification(user.id)
        clock.advance(minutes=11)

        with pytest.raises(InvalidOrExpiredCodeError):
            await service.confirm_email(user.id, code)

    @pytest.mark.asyncio
    async def test_delivery_failure_still_issues(self, users, codes_repo, clock):
        settings = make_settings()
        codes = CodeIssuer(codes_repo, clock=clock)
        failing = RecordingCodeSender(error=RuntimeError("smtp down"))
        service = ProfileService(
            users=users, codes=codes, sender=failing, auth=MagicMock(spec=AuthService), settings=settings
        )
        user = users.add(email="ana@example.com")

        code = await service.send_email_verification(user.id)

        assert len(codes_repo.live_for("ana@example.com", CodeKind.EMAIL_VERIFY, clock.now)) == 1
        assert len(code) == 6


class TestPhoneVerification:
    @pytest.mark.asyncio
    async def test_send_stores_number_unverified(self, service, users, sender):
        user = users.add(email="ana@example.com")

        code = await service.send_phone_verification(user.id, "+1 (555) 123-4567")

        assert users.rows[user.id]["phone"] == PHONE
        assert users.rows[user.id]["phone_verified"] is None
        assert sender.sent == [(PHONE, code, CodeKind.PHONE_VERIFY)]

    @pytest.mark.asyncio
    async def test_confirm_sets_verified(self, service, users):
        user = users.add(email="ana@example.com")
        code = await service.send_phone_verification(user.id, PHONE)

        assert await service.confirm_phone(user.id, code) == PHONE
        stored = users.get_by_id(user.id)
        assert stored.phone == PHONE
        assert stored.phone_verified is not None

    @pytest.mark.asyncio
    async def test_code_is_bound_to_user(self, service, users):
        ana = users.add(email="ana@example.com")
        bob = users.add(email="bob@example.com")
        code = await service.send_phone_verification(ana.id, PHONE)

        with pytest.raises(InvalidOrExpiredCodeError):
            await service.confirm_phone(bob.id, code)

    @pytest.mark.asyncio
    async def test_confirm_is_single_use(self, service, users):
        user = users.add(email="ana@example.com")
        code = await service.send_phone_verification(user.id, PHONE)
        await service.confirm_phone(user.id, code)

        with pytest.raises(InvalidOrExpiredCodeError):
            await service.confirm_phone(user.id, code)

    @pytest.mark.asyncio
    async def test_new_number_retires_code_for_previous_number(self, service, users):
        user = users.add(email="ana@example.com")
        old_code = await service.send_phone_verification(user.id, PHONE)
        new_code = await service.send_phone_verification(user.id, "+15559876543")

        if old_code != new_code:
            with pytest.raises(InvalidOrExpiredCodeError):
                await service.confirm_phone(user.id, old_code)
        assert await service.confirm_phone(user.id, new_code) == "+15559876543"
        assert users.get_by_id(user.id).phone == "+15559876543"

    @pytest.mark.asyncio
    async def test_one_live_code_per_user(self, service, users, codes_repo):
        user = users.add(email="ana@example.com")
        await service.send_phone_verification(user.id, PHONE)
        await service.send_phone_verification(user.id, "+15559876543")

        live = [r for r in codes_repo.records.values() if r.kind == CodeKind.PHONE_VERIFY]
        assert [r.target for r in live] == ["+15559876543"]

    @pytest.mark.asyncio
    async def test_number_owned_by_someone_else(self, service, users):
        users.add(phone=PHONE)
        user = users.add(email="ana@example.com")

        with pytest.raises(ConflictError) as exc_info:
            await service.send_phone_verification(user.id, PHONE)
        assert exc_info.value.code == "PHONE_IN_USE"

    @pytest.mark.asyncio
    async def test_short_number(self, service, users):
        user = users.add(email="ana@example.com")

        with pytest.raises(ValidationError) as exc_info:
            await service.send_phone_verification(user.id, "555-1234")
        assert exc_info.value.code == "INVALID_PHONE"
