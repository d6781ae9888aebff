"""Tests for salon month metrics, the weekly schedule and platform counters."""

from datetime import date

import pytest

from salonbook.services.dashboard import (
    month_bounds, previous_month, percent_change, salon_month_stats, week_start, weekly_schedule,
    platform_stats
)
from conftest import MONDAY, SUNDAY, add_appointment, make_salon


class TestHelpers:
    """Test calendar helpers."""

    def test_month_bounds(self):
        assert month_bounds(2030, 2) == (date(2030, 2, 1), date(2030, 2, 28))

    def test_previous_month_wraps_year(self):
        assert previous_month(2030, 1) == (2029, 12)
        assert previous_month(2030, 5) == (2030, 4)

    def test_percent_change(self):
        assert percent_change(15, 10) == 50.0
        assert percent_change(5, 0) == 100.0
        assert percent_change(0, 0) == 0.0

    def test_week_starts_on_sunday(self):
        assert week_start(MONDAY) == SUNDAY
        assert week_start(SUNDAY) == SUNDAY
        assert week_start(date(2030, 1, 12)) == SUNDAY


@pytest.mark.usefixtures('ctx')
class TestSalonMonthStats:
    """Test the salon dashboard metrics."""

    def test_counts_and_revenue(self, seed):
        add_appointment(seed, MONDAY, '09:00', status='completed')
        add_appointment(seed, MONDAY, '10:00', status='completed', phone='11911112222')
        add_appointment(seed, MONDAY, '11:00', status='canceled', phone='11933334444')
        add_appointment(seed, date(2030, 1, 20), '09:00')
        add_appointment(seed, date(2029, 12, 20), '09:00', status='completed')

        stats = salon_month_stats(seed.salon_id, 2030, 1)

        assert stats['month'] == '2030-01'
        assert stats['total_appointments'] == 4
        assert stats['completed_appointments'] == 2
        assert stats['canceled_appointments'] == 1
        assert stats['scheduled_appointments'] == 1
        assert stats['total_revenue'] == 100.0
        assert stats['appointments_trend'] == 300.0
        assert stats['revenue_trend'] == 100.0
        assert stats['top_services'][0]['count'] == 4
        assert stats['top_professionals'][0]['id'] == seed.professional_id
        assert {entry['status']: entry['percentage'] for entry in stats['status_counts']}['completed'] == 50.0

    def test_empty_month(self, seed):
        stats = salon_month_stats(seed.salon_id, 2030, 3)

        assert stats['total_appointments'] == 0
        assert stats['total_revenue'] == 0.0
        assert stats['top_services'] == []

    def test_other_salons_are_not_counted(self, seed, other_seed):
        add_appointment(other_seed, MONDAY, '09:00', status='completed')
        assert salon_month_stats(seed.salon_id, 2030, 1)['total_appointments'] == 0


@pytest.mark.usefixtures('ctx')
class TestWeeklySchedule:
    """Test the week view."""

    def test_groups_by_day(self, seed):
        add_appointment(seed, MONDAY, '10:00')
        add_appointment(seed, MONDAY, '09:00', phone='11911112222')
        add_appointment(seed, date(2030, 1, 13), '09:00')

        schedule = weekly_schedule(seed.salon_id, MONDAY)

        assert schedule['week_start'] == SUNDAY
        assert schedule['week_end'] == date(2030, 1, 12)
        assert len(schedule['days']) == 7
        monday = schedule['days'][1]
        assert monday['date'] == MONDAY
        assert [a['time'].strftime('%H:%M') for a in monday['appointments']] == ['09:00', '10:00']
        assert sum(len(day['appointments']) for day in schedule['days']) == 2


@pytest.mark.usefixtures('ctx')
class TestPlatformStats:
    """Test the super-admin counters."""

    def test_counts_per_plan(self, seed):
        make_salon('trial-salon', 'trial@mail.com', plan='trial', trial_expires_on=date(2030, 2, 1))
        make_salon('closed-salon', 'closed@mail.com', plan='inactive')
        add_appointment(seed, MONDAY, '09:00', status='completed')

        stats = platform_stats(today=MONDAY)

        assert stats['total_salons'] == 3
        assert stats['active_salons'] == 1
        assert stats['trial_salons'] == 1
        assert stats['inactive_salons'] == 1
        assert stats['appointments_this_month'] == 1
        assert stats['revenue_this_month'] == 50.0
        assert stats['total_professionals'] == 3
        assert len(stats['recent_salons']) == 3
