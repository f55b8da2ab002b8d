from __future__ import annotations

import math

import pytest

from chat_attendance.core.constants import EARTH_RADIUS_METERS
from chat_attendance.core.enums import WorkProfile
from chat_attendance.geofence.service import LocationService
from chat_attendance.geofence.validator import Coordinate, GeofenceReason, GeofenceValidator, haversine_distance
from chat_attendance.sites.model import Site

EIFFEL = Site(site_id="site-1", tenant_id="tenant-a", name="Tour", latitude=48.8584, longitude=2.2945, radius=200)


def test_distance_between_identical_points_is_zero():
    assert haversine_distance(48.8584, 2.2945, 48.8584, 2.2945) == 0


def test_distance_of_one_kilometer_along_a_meridian():
    delta_deg = math.degrees(1000 / EARTH_RADIUS_METERS)
    distance = haversine_distance(48.8584, 2.2945, 48.8584 + delta_deg, 2.2945)
    assert abs(distance - 1000) <= 1


def test_mobile_profile_is_always_compliant_without_distance():
    verdict = GeofenceValidator().evaluate(WorkProfile.MOBILE, Coordinate(0.0, 0.0), EIFFEL)
    assert verdict.compliant is True
    assert verdict.warn is False
    assert verdict.distance is None
    assert verdict.reason == GeofenceReason.MOBILE_PROFILE


def test_sedentary_without_position_is_provisional():
    verdict = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, None, EIFFEL)
    assert verdict.compliant is True
    assert verdict.warn is True
    assert verdict.reason == GeofenceReason.LOCATION_MISSING
    assert "sous réserve" in verdict.message


def test_sedentary_without_site_warns():
    verdict = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, Coordinate(48.86, 2.29), None)
    assert verdict.compliant is True
    assert verdict.warn is True
    assert verdict.reason == GeofenceReason.NO_SITE


def test_site_without_coordinates_passes_silently():
    site = Site(site_id="s", tenant_id="tenant-a", name="Dépôt")
    verdict = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, Coordinate(48.86, 2.29), site)
    assert verdict.compliant is True
    assert verdict.warn is False
    assert verdict.distance is None
    assert verdict.reason == GeofenceReason.SITE_NOT_LOCATED


def test_inside_radius_is_clean():
    verdict = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, Coordinate(48.8600, 2.2945), EIFFEL)
    assert verdict.compliant is True
    assert verdict.warn is False
    assert verdict.distance == 178
    assert verdict.message == "✅ Pointage validé (178m du site)"


def test_outside_radius_is_flagged_not_blocked():
    verdict = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, Coordinate(48.8700, 2.2945), EIFFEL)
    assert verdict.compliant is True
    assert verdict.warn is True
    assert verdict.distance == pytest.approx(1290, abs=2)
    assert verdict.reason == GeofenceReason.OUTSIDE_RADIUS
    assert "rayon autorisé: 200m" in verdict.message


def test_default_radius_applies_when_site_has_none():
    site = Site(site_id="s", tenant_id="tenant-a", name="Bureau", latitude=48.8584, longitude=2.2945)
    # ~190 m north: inside the 200 m default.
    inside = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, Coordinate(48.8601, 2.2945), site)
    # ~223 m north: outside it.
    outside = GeofenceValidator().evaluate(WorkProfile.SEDENTARY, Coordinate(48.8604, 2.2945), site)
    assert inside.warn is False
    assert outside.warn is True
    assert outside.radius == 200


def test_location_service_never_reads_a_site_from_another_tenant(make_employee, sites_repo):
    sites_repo.items["site-b"] = Site(
        site_id="site-b", tenant_id="tenant-b", name="Autre", latitude=48.8584, longitude=2.2945, radius=200
    )
    employee = make_employee(work_profile=WorkProfile.SEDENTARY, site_id="site-b")

    verdict = LocationService(sites_repo).evaluate_location(employee, Coordinate(48.8584, 2.2945))

    assert verdict.reason == GeofenceReason.NO_SITE


def test_location_service_resolves_the_employee_site(make_employee, sites_repo):
    sites_repo.items[EIFFEL.site_id] = EIFFEL
    employee = make_employee(work_profile=WorkProfile.SEDENTARY, site_id=EIFFEL.site_id)

    verdict = LocationService(sites_repo).evaluate_location(employee, Coordinate(48.8600, 2.2945))

    assert verdict.reason == GeofenceReason.WITHIN_RADIUS
    assert verdict.distance == 178
