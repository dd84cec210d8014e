#!/usr/bin/env python3
"""Tests for the service job state machine."""

from datetime import date

import pytest

from fleet_engine.errors import InvalidTransition, NotFound, PreconditionFailed, ValidationError
from fleet_engine.models import JobStatus
from fleet_engine.services import fault_ledger, job_lifecycle, mechanic_tracker


class TestCreateJob:
    """Tests for job creation."""

    def test_new_job_is_pending_with_unaccepted_assignments(self, job, mechanics):
        """Seeded mechanics start as pending offers."""
        assert job.status == JobStatus.PENDING
        assert [a.mechanic_id for a in job.assigned_mechanics] == [mechanics[0].id, mechanics[1].id]
        assert not any(a.accepted for a in job.assigned_mechanics)
        assert job.actual_cost is None

    def test_job_numbers_are_sequential(self, store, job_payload):
        """Job numbers carry the prefix and a store-wide sequence."""
        first = job_lifecycle.create_job(store, job_payload)
        second = job_lifecycle.create_job(store, job_payload)
        assert first.job_number.startswith("SJ-")
        assert first.job_number.endswith("-00001")
        assert second.job_number.endswith("-00002")

    def test_backdated_schedule_is_allowed(self, store, job_payload):
        """Incidents that already happened can be recorded."""
        job_payload["scheduled_date"] = date(2001, 1, 1)
        job = job_lifecycle.create_job(store, job_payload)
        assert job.scheduled_date == date(2001, 1, 1)

    def test_unknown_vehicle(self, store, job_payload):
        """A job needs a resolvable vehicle."""
        job_payload["vehicle_id"] = "does-not-exist"
        with pytest.raises(NotFound):
            job_lifecycle.create_job(store, job_payload)
        assert store.service_jobs == {}

    @pytest.mark.parametrize("field", ["title", "description", "instructions"])
    def test_blank_text_fields(self, store, job_payload, field):
        """Title, description and instructions are required."""
        job_payload[field] = "   "
        with pytest.raises(ValidationError):
            job_lifecycle.create_job(store, job_payload)

    def test_negative_estimated_cost(self, store, job_payload):
        """Estimated cost cannot be negative."""
        job_payload["estimated_cost"] = -1
        with pytest.raises(ValidationError):
            job_lifecycle.create_job(store, job_payload)

    def test_requires_a_mechanic(self, store, job_payload):
        """At least one mechanic must be seeded."""
        job_payload["mechanic_ids"] = []
        with pytest.raises(ValidationError):
            job_lifecycle.create_job(store, job_payload)

    def test_unknown_mechanic_leaves_nothing_behind(self, store, job_payload):
        """A failed creation does not consume a job number or store a job."""
        job_payload["mechanic_ids"] = ["ghost"]
        with pytest.raises(NotFound):
            job_lifecycle.create_job(store, job_payload)
        assert store.service_jobs == {}
        job_payload["mechanic_ids"] = [m.id for m in store.mechanics.values()][:1]
        assert job_lifecycle.create_job(store, job_payload).job_number.endswith("-00001")

    def test_required_parts_are_seeded(self, store, job_payload):
        """Parts supplied at creation become line items."""
        job_payload["required_parts"] = [{"part_name": "Brake pad", "quantity": 4, "unit_price": 25.0}]
        job = job_lifecycle.create_job(store, job_payload)
        assert job.total_parts == 1
        assert job.required_parts[0].total_price == 100.0

    def test_fault_is_linked_not_resolved(self, store, job_payload, vehicle):
        """The originating fault is linked but stays unresolved."""
        fault = fault_ledger.record_fault(store, vehicle.id, {"error_code": "P0420", "severity": "MODERATE"})
        job_payload["vehicle_error_id"] = fault.id
        job = job_lifecycle.create_job(store, job_payload)
        stored = fault_ledger.get_fault(store, fault.id)
        assert job.vehicle_error_id == fault.id
        assert stored.service_job_id == job.id
        assert stored.resolved is False


class TestStartJob:
    """Tests for PENDING -> IN_PROGRESS."""

    def test_start_without_accepted_mechanic(self, store, job):
        """Starting with zero accepted mechanics fails."""
        with pytest.raises(PreconditionFailed):
            job_lifecycle.start_job(store, job.id)
        assert job_lifecycle.get_job(store, job.id).status == JobStatus.PENDING

    def test_start_after_one_acceptance(self, store, job, mechanics):
        """One accepted mechanic is enough."""
        mechanic_tracker.accept_assignment(store, job.id, mechanics[0].id)
        started = job_lifecycle.start_job(store, job.id)
        assert started.status == JobStatus.IN_PROGRESS
        assert started.started_at is not None

    def test_start_twice(self, store, job, mechanics):
        """IN_PROGRESS cannot be entered again."""
        mechanic_tracker.accept_assignment(store, job.id, mechanics[0].id)
        job_lifecycle.start_job(store, job.id)
        with pytest.raises(InvalidTransition):
            job_lifecycle.start_job(store, job.id)


class TestCompleteJob:
    """Tests for IN_PROGRESS -> COMPLETED."""

    def _start(self, store, job, mechanic):
        mechanic_tracker.accept_assignment(store, job.id, mechanic.id)
        return job_lifecycle.start_job(store, job.id)

    def test_full_scenario(self, store, job, mechanics):
        """Create, accept, start, complete with an explicit cost."""
        self._start(store, job, mechanics[0])
        done = job_lifecycle.complete_job(store, job.id, {"actual_cost": 120, "completion_notes": "Pads replaced"})
        assert done.status == JobStatus.COMPLETED
        assert done.actual_cost == 120
        assert done.completion_notes == "Pads replaced"
        assert done.completed_at is not None
        second = done.find_assignment(mechanics[1].id)
        assert second is not None and second.accepted is False

    def test_actual_cost_defaults_to_estimate(self, store, job, mechanics):
        """Omitting actual cost falls back to the estimated cost."""
        self._start(store, job, mechanics[0])
        done = job_lifecycle.complete_job(store, job.id)
        assert done.actual_cost == 100.0

    def test_negative_actual_cost(self, store, job, mechanics):
        """A negative cost is rejected and the job stays in progress."""
        self._start(store, job, mechanics[0])
        with pytest.raises(ValidationError):
            job_lifecycle.complete_job(store, job.id, {"actual_cost": -5})
        assert job_lifecycle.get_job(store, job.id).status == JobStatus.IN_PROGRESS

    def test_complete_pending_job(self, store, job):
        """A job has to be started before it can complete."""
        with pytest.raises(InvalidTransition):
            job_lifecycle.complete_job(store, job.id)

    def test_completion_resolves_fault(self, store, job_payload, vehicle, mechanics):
        """The linked fault is resolved and stamped with the job."""
        fault = fault_ledger.record_fault(store, vehicle.id, {"error_code": "P0300", "severity": "CRITICAL"})
        job_payload["vehicle_error_id"] = fault.id
        job = job_lifecycle.create_job(store, job_payload)
        self._start(store, job, mechanics[0])
        job_lifecycle.complete_job(store, job.id)
        resolved = fault_ledger.get_fault(store, fault.id)
        assert resolved.resolved is True
        assert resolved.status.value == "RESOLVED"
        assert resolved.service_job_id == job.id
        assert resolved.resolved_at is not None


class TestCancelAndTerminalStates:
    """Tests for cancellation and the terminal-state guard."""

    def test_cancel_pending(self, store, job):
        """Pending jobs can be cancelled."""
        cancelled = job_lifecycle.cancel_job(store, job.id)
        assert cancelled.status == JobStatus.CANCELLED
        assert cancelled.cancelled_at is not None

    def test_cancel_in_progress_needs_no_quorum(self, store, job, mechanics):
        """Cancelling is forced even with mechanics still pending."""
        mechanic_tracker.accept_assignment(store, job.id, mechanics[0].id)
        job_lifecycle.start_job(store, job.id)
        assert job_lifecycle.cancel_job(store, job.id).status == JobStatus.CANCELLED

    def test_cancel_releases_fault(self, store, job_payload, vehicle):
        """A cancelled job hands its fault back so a new job can take it."""
        fault = fault_ledger.record_fault(store, vehicle.id, {"error_code": "B1000"})
        job_payload["vehicle_error_id"] = fault.id
        job = job_lifecycle.create_job(store, job_payload)
        job_lifecycle.cancel_job(store, job.id)
        released = fault_ledger.get_fault(store, fault.id)
        assert released.service_job_id is None
        assert released.resolved is False
        assert job_lifecycle.create_job(store, job_payload).vehicle_error_id == fault.id

    @pytest.mark.parametrize("terminal", ["cancel", "complete"])
    def test_no_transition_out_of_terminal_state(self, store, job, mechanics, terminal):
        """COMPLETED and CANCELLED accept nothing further."""
        mechanic_tracker.accept_assignment(store, job.id, mechanics[0].id)
        job_lifecycle.start_job(store, job.id)
        if terminal == "cancel":
            job_lifecycle.cancel_job(store, job.id)
        else:
            job_lifecycle.complete_job(store, job.id)
        for attempt in (
            lambda: job_lifecycle.start_job(store, job.id),
            lambda: job_lifecycle.complete_job(store, job.id),
            lambda: job_lifecycle.cancel_job(store, job.id),
            lambda: job_lifecycle.update_job(store, job.id, {"title": "Late edit"}),
            lambda: mechanic_tracker.accept_assignment(store, job.id, mechanics[1].id),
            lambda: mechanic_tracker.decline_assignment(store, job.id, mechanics[1].id),
            lambda: mechanic_tracker.assign_mechanics(store, job.id, [mechanics[2].id]),
        ):
            with pytest.raises(InvalidTransition):
                attempt()


class TestQueries:
    """Tests for job listing and updates."""

    def test_list_by_status_and_vehicle(self, store, job_payload, other_vehicle, mechanics):
        """Filters combine."""
        first = job_lifecycle.create_job(store, job_payload)
        job_payload["vehicle_id"] = other_vehicle.id
        second = job_lifecycle.create_job(store, job_payload)
        job_lifecycle.cancel_job(store, second.id)
        assert [j.id for j in job_lifecycle.list_jobs(store, status=JobStatus.PENDING)] == [first.id]
        assert [j.id for j in job_lifecycle.list_jobs(store, vehicle_id=other_vehicle.id)] == [second.id]
        assert [j.id for j in job_lifecycle.list_ongoing_jobs(store)] == [first.id]
        assert job_lifecycle.list_completed_jobs(store) == []

    def test_update_details(self, store, job):
        """Details can change while the job is open."""
        updated = job_lifecycle.update_job(store, job.id, {"priority": "URGENT", "estimated_cost": 250})
        assert updated.priority.value == "URGENT"
        assert updated.estimated_cost == 250
        assert updated.title == job.title

    def test_returned_job_is_detached(self, store, job):
        """Mutating a returned job does not touch the store."""
        job.status = JobStatus.COMPLETED
        job.assigned_mechanics.clear()
        stored = job_lifecycle.get_job(store, job.id)
        assert stored.status == JobStatus.PENDING
        assert stored.total_mechanics == 2
