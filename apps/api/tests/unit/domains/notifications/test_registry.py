"""
Tests for channel targeting rules in src/domains/notifications/registry.py
"""

import pytest

from src.domains.notifications.exceptions import UnknownChannelError
from src.domains.notifications.models import AcknowledgeMode, NotificationState
from src.domains.notifications.registry import (
    ADS_NOTE,
    ADS_TASK_DELAY,
    CHANNELS,
    CHURN,
    COMERCIAL_DELAY,
    TASK_DELAY,
    get_channel,
    is_ads_task_delay_target,
    is_task_delay_target,
    truncate_note,
)
from src.shared.permissions.models import UserRole


def delay_notification(owner_id: str, owner_role: str) -> dict:
    return {
        "id": "n-1",
        "task_owner_id": owner_id,
        "task_owner_role": owner_role,
        "task_title": "Landing page",
    }


class TestChurnEligibility:
    @pytest.mark.parametrize(
        "role",
        [
            UserRole.CEO,
            UserRole.GESTOR_ADS,
            UserRole.GESTOR_PROJETOS,
            UserRole.SUCESSO_CLIENTE,
            UserRole.FINANCEIRO,
            UserRole.CONSULTOR_COMERCIAL,
        ],
    )
    def test_eligible_roles(self, make_principal, role):
        assert CHURN.addresses(make_principal(role), {"id": "n-1"}) is True

    @pytest.mark.parametrize("role", [UserRole.DESIGN, UserRole.RH, UserRole.DEVS])
    def test_other_roles_are_not_addressed(self, make_principal, role):
        assert CHURN.addresses(make_principal(role), {"id": "n-1"}) is False


class TestTaskDelayTargeting:
    def test_ads_manager_sees_only_own_ads_tasks(self, make_principal):
        me = make_principal(UserRole.GESTOR_ADS, user_id="ads-1")

        assert is_task_delay_target(me, delay_notification("ads-1", "gestor_ads"))
        assert not is_task_delay_target(me, delay_notification("ads-2", "gestor_ads"))

    @pytest.mark.parametrize(
        "role", [UserRole.SUCESSO_CLIENTE, UserRole.GESTOR_PROJETOS, UserRole.CEO]
    )
    def test_supervisors_see_ads_tasks(self, make_principal, role):
        assert is_task_delay_target(
            make_principal(role), delay_notification("ads-1", "gestor_ads")
        )

    def test_other_roles_never_see_ads_tasks(self, make_principal):
        assert not is_task_delay_target(
            make_principal(UserRole.DESIGN), delay_notification("ads-1", "gestor_ads")
        )

    def test_owner_sees_own_non_ads_task(self, make_principal):
        designer = make_principal(UserRole.DESIGN, user_id="d-1")

        assert is_task_delay_target(designer, delay_notification("d-1", "design"))
        assert not is_task_delay_target(designer, delay_notification("d-2", "design"))

    def test_customer_success_does_not_see_other_departments(self, make_principal):
        assert not is_task_delay_target(
            make_principal(UserRole.SUCESSO_CLIENTE),
            delay_notification("d-1", "design"),
        )

    @pytest.mark.parametrize("role", [UserRole.GESTOR_PROJETOS, UserRole.CEO])
    def test_admins_see_every_delay(self, make_principal, role):
        assert is_task_delay_target(
            make_principal(role), delay_notification("d-1", "design")
        )


class TestDepartmentDelayChannels:
    @pytest.mark.parametrize("department", ["design", "dev", "video", "produtora"])
    def test_card_delays_reach_every_viewer(self, make_principal, department):
        channel = get_channel(f"{department}_delay")

        assert channel.mode is AcknowledgeMode.DISMISSAL
        assert channel.table == f"{department}_delay_notifications"
        assert channel.acknowledgment_table == f"{department}_notification_dismissals"
        assert channel.requires_justification is False
        for role in (UserRole.DESIGN, UserRole.FINANCEIRO, UserRole.CEO):
            assert channel.addresses(make_principal(role), {"id": "n-1"})

    def test_comercial_delay_targets_its_user(self, make_principal):
        me = make_principal(UserRole.CONSULTOR_COMERCIAL, user_id="com-1")
        other = make_principal(UserRole.CONSULTOR_COMERCIAL, user_id="com-2")
        notification = {"id": "n-1", "user_id": "com-1"}

        assert COMERCIAL_DELAY.addresses(me, notification) is True
        assert COMERCIAL_DELAY.addresses(other, notification) is False
        assert COMERCIAL_DELAY.acknowledgment_table == "comercial_delay_justifications"
        assert COMERCIAL_DELAY.terminal_state is NotificationState.JUSTIFIED

    def test_ads_manager_sees_own_overdue_ads_tasks(self, make_principal):
        me = make_principal(UserRole.GESTOR_ADS, user_id="ads-1")
        notification = {"id": "n-1", "ads_manager_id": "ads-1"}

        assert is_ads_task_delay_target(me, notification)
        assert not is_ads_task_delay_target(
            me, {**notification, "ads_manager_id": "ads-2"}
        )

    @pytest.mark.parametrize(
        "role", [UserRole.SUCESSO_CLIENTE, UserRole.GESTOR_PROJETOS, UserRole.CEO]
    )
    def test_supervisors_see_all_overdue_ads_tasks(self, make_principal, role):
        assert ADS_TASK_DELAY.addresses(
            make_principal(role), {"id": "n-1", "ads_manager_id": "ads-1"}
        )

    def test_other_roles_never_see_overdue_ads_tasks(self, make_principal):
        assert not ADS_TASK_DELAY.addresses(
            make_principal(UserRole.DESIGN), {"id": "n-1", "ads_manager_id": "ads-1"}
        )


class TestReadFlagChannels:
    def test_ads_note_targets_its_manager(self, make_principal):
        manager = make_principal(UserRole.GESTOR_ADS, user_id="ads-1")
        other = make_principal(UserRole.GESTOR_ADS, user_id="ads-2")
        note = {"id": "n-1", "ads_manager_id": "ads-1", "read": False}

        assert ADS_NOTE.addresses(manager, note) is True
        assert ADS_NOTE.addresses(other, note) is False

    def test_completion_channels_target_requester(self, make_principal):
        requester = make_principal(UserRole.GESTOR_ADS, user_id="req-1")
        for name in (
            "design_completion",
            "dev_completion",
            "produtora_completion",
            "atrizes_completion",
        ):
            channel = get_channel(name)
            assert channel.mode is AcknowledgeMode.READ_FLAG
            assert channel.terminal_state is NotificationState.ACTED_UPON
            assert channel.addresses(requester, {"requester_id": "req-1"})


class TestRegistry:
    def test_channels_are_registered(self):
        assert set(CHANNELS) == {
            "churn",
            "task_delay",
            "comercial_delay",
            "ads_task_delay",
            "design_delay",
            "dev_delay",
            "video_delay",
            "produtora_delay",
            "ads_note",
            "design_completion",
            "dev_completion",
            "produtora_completion",
            "atrizes_completion",
        }

    def test_churn_sorted_by_churn_date(self):
        assert CHURN.order_by == "notification_date"

    def test_task_delay_terminal_state(self):
        assert TASK_DELAY.terminal_state is NotificationState.JUSTIFIED
        assert TASK_DELAY.requires_justification is True

    def test_unknown_channel(self):
        with pytest.raises(UnknownChannelError) as exc_info:
            get_channel("weather")

        assert exc_info.value.status_code == 404

    def test_truncate_note(self):
        assert truncate_note("short") == "short"
        assert truncate_note("x" * 100) == "x" * 80 + "..."


class TestStateFor:
    @pytest.mark.asyncio
    async def test_dismissal_states(self, memory_db, make_principal):
        (alert,) = memory_db.seed("churn_notifications", {"client_name": "Acme"})
        viewer = make_principal(UserRole.CEO)
        outsider = make_principal(UserRole.DESIGN)

        assert await CHURN.state_for(memory_db, viewer, alert) is NotificationState.VISIBLE
        assert await CHURN.state_for(memory_db, outsider, alert) is NotificationState.CREATED

        memory_db.seed(
            "churn_notification_dismissals",
            {"notification_id": alert["id"], "user_id": viewer.id},
        )
        assert await CHURN.state_for(memory_db, viewer, alert) is NotificationState.DISMISSED

    @pytest.mark.asyncio
    async def test_read_flag_states(self, memory_db, make_principal):
        manager = make_principal(UserRole.GESTOR_ADS, user_id="ads-1")

        unread = {"id": "n-1", "ads_manager_id": "ads-1", "read": False}
        read = {**unread, "read": True}

        assert await ADS_NOTE.state_for(memory_db, manager, unread) is NotificationState.VISIBLE
        assert await ADS_NOTE.state_for(memory_db, manager, read) is NotificationState.ACTED_UPON
