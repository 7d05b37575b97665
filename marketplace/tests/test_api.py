# tests/test_api.py
import pytest
from django.db import DatabaseError
from django.urls import reverse

from marketplace.api.exceptions import marketplace_exception_handler
from marketplace.models import ArtisanProfile, Device, Job, JobMatchingLog, JobStatus


def _payload(category, **overrides):
    payload = {
        "service_id": category.id,
        "description": "Water heater stopped working this morning",
        "photo_urls": ["https://example.com/heater.jpg"],
        "latitude": 6.5244,
        "longitude": 3.3792,
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
def test_create_job(customer_client, category, artisan_profile):
    res = customer_client.post(reverse("jobs-list"), _payload(category), format="json")
    assert res.status_code == 201, res.content
    data = res.json()
    assert data["status"] == JobStatus.PENDING
    assert data["service"] == category.id
    assert data["service_detail"]["name"] == "Plumbing"
    assert JobMatchingLog.objects.filter(job_id=data["id"]).count() == 1


@pytest.mark.django_db
def test_create_job_survives_push_failure(customer_client, category, artisan_profile, settings):
    settings.MARKETPLACE = {
        **settings.MARKETPLACE,
        "PUSH_PROVIDER": "marketplace.tests.conftest.FailingPushProvider",
    }

    res = customer_client.post(reverse("jobs-list"), _payload(category), format="json")

    assert res.status_code == 201, res.content
    job_id = res.json()["id"]
    assert Job.objects.filter(pk=job_id, status=JobStatus.PENDING).exists()
    log = JobMatchingLog.objects.get(job_id=job_id)
    assert log.artisan_id == artisan_profile.id
    assert log.is_selected


@pytest.mark.django_db
@pytest.mark.parametrize("overrides", [
    {"latitude": 100},
    {"longitude": -200},
    {"description": "short"},
    {"photo_urls": ["not-a-url"]},
])
def test_create_job_invalid_payload(customer_client, category, overrides):
    res = customer_client.post(reverse("jobs-list"), _payload(category, **overrides), format="json")
    assert res.status_code == 400
    assert not Job.objects.exists()


@pytest.mark.django_db
def test_create_job_unknown_service(customer_client, category):
    res = customer_client.post(reverse("jobs-list"), _payload(category, service_id=9999), format="json")
    assert res.status_code == 400


@pytest.mark.django_db
def test_artisan_cannot_create_job(api_client, category, artisan_profile):
    api_client.force_authenticate(user=artisan_profile.user)
    res = api_client.post(reverse("jobs-list"), _payload(category), format="json")
    assert res.status_code == 403


@pytest.mark.django_db
def test_anonymous_cannot_create_job(api_client, category):
    res = api_client.post(reverse("jobs-list"), _payload(category), format="json")
    assert res.status_code == 401


@pytest.mark.django_db
def test_my_jobs(customer_client, job, other_customer, category):
    Job.objects.create(user=other_customer, service=category, description="Not mine at all",
                       latitude=6.5, longitude=3.3)
    res = customer_client.get(reverse("jobs-my-jobs"))
    assert res.status_code == 200
    assert [j["id"] for j in res.json()] == [job.id]


@pytest.mark.django_db
def test_job_detail_owner_only(api_client, job, other_customer):
    api_client.force_authenticate(user=other_customer)
    res = api_client.get(reverse("jobs-detail", kwargs={"pk": job.id}))
    assert res.status_code == 403

    api_client.force_authenticate(user=job.user)
    res = api_client.get(reverse("jobs-detail", kwargs={"pk": job.id}))
    assert res.status_code == 200
    assert res.json()["id"] == job.id


@pytest.mark.django_db
def test_matches_endpoint(customer_client, job, artisan_profile):
    res = customer_client.get(reverse("jobs-matches", kwargs={"pk": job.id}), {"limit": 3})
    assert res.status_code == 200
    data = res.json()
    assert len(data) == 1
    assert {"artisan_id", "artisan_name", "match_score", "distance_km", "rating",
            "specialization_level", "is_online", "service_radius_km"}.issubset(data[0].keys())
    assert data[0]["artisan_id"] == artisan_profile.id
    assert data[0]["match_score"] == pytest.approx(19.98, abs=0.05)


@pytest.mark.django_db
@pytest.mark.parametrize("limit", [0, -3, 51, "abc"])
def test_matches_endpoint_bad_limit(customer_client, job, limit):
    res = customer_client.get(reverse("jobs-matches", kwargs={"pk": job.id}), {"limit": limit})
    assert res.status_code == 400
    assert not JobMatchingLog.objects.exists()


@pytest.mark.django_db
def test_matches_endpoint_forbidden_for_other_customer(api_client, job, other_customer):
    api_client.force_authenticate(user=other_customer)
    res = api_client.get(reverse("jobs-matches", kwargs={"pk": job.id}))
    assert res.status_code == 403
    assert res.json()["detail"]


@pytest.mark.django_db
def test_matches_endpoint_unknown_job(customer_client):
    res = customer_client.get(reverse("jobs-matches", kwargs={"pk": 987654}))
    assert res.status_code == 404


@pytest.mark.django_db
def test_update_status(customer_client, job):
    url = reverse("jobs-update-status", kwargs={"pk": job.id})
    res = customer_client.put(url, {"status": "CANCELLED"}, format="json")
    assert res.status_code == 200
    assert res.json()["status"] == JobStatus.CANCELLED


@pytest.mark.django_db
def test_update_status_invalid_value(customer_client, job):
    url = reverse("jobs-update-status", kwargs={"pk": job.id})
    res = customer_client.put(url, {"status": "FINISHED"}, format="json")
    assert res.status_code == 400


@pytest.mark.django_db
def test_update_status_rejects_reopening(customer_client, job):
    Job.objects.filter(pk=job.pk).update(status=JobStatus.COMPLETED)
    url = reverse("jobs-update-status", kwargs={"pk": job.id})
    res = customer_client.put(url, {"status": "PENDING"}, format="json")
    assert res.status_code == 400
    assert res.json()["detail"]
    job.refresh_from_db()
    assert job.status == JobStatus.COMPLETED


@pytest.mark.django_db
def test_assigned_artisan_can_update_status(api_client, job, artisan_profile):
    Job.objects.filter(pk=job.pk).update(status=JobStatus.ASSIGNED, assigned_artisan=artisan_profile)
    api_client.force_authenticate(user=artisan_profile.user)
    res = api_client.put(reverse("jobs-update-status", kwargs={"pk": job.id}),
                         {"status": "IN_PROGRESS"}, format="json")
    assert res.status_code == 200
    assert res.json()["status"] == JobStatus.IN_PROGRESS


@pytest.mark.django_db
def test_admin_assigns_artisan(admin_client, job, artisan_profile):
    res = admin_client.post(reverse("jobs-assign", kwargs={"pk": job.id}),
                            {"artisan_id": artisan_profile.id}, format="json")
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == JobStatus.ASSIGNED
    assert data["assigned_artisan"] == artisan_profile.id
    assert data["assigned_artisan_detail"]["name"] == artisan_profile.display_name


@pytest.mark.django_db
def test_customer_cannot_assign(customer_client, job, artisan_profile):
    res = customer_client.post(reverse("jobs-assign", kwargs={"pk": job.id}),
                               {"artisan_id": artisan_profile.id}, format="json")
    assert res.status_code == 403


@pytest.mark.django_db
def test_admin_job_listing_filters_by_status(admin_client, job, customer, category):
    Job.objects.create(user=customer, service=category, description="Cancelled one here",
                       latitude=6.5, longitude=3.3, status=JobStatus.CANCELLED)
    res = admin_client.get(reverse("jobs-list"), {"status": "PENDING"})
    assert res.status_code == 200
    data = res.json()
    assert data["count"] == 1
    assert data["results"][0]["id"] == job.id


@pytest.mark.django_db
def test_job_logs_and_analytics(admin_client, job, make_artisan):
    make_artisan()
    make_artisan(radius=0.01)
    admin_client.get(reverse("jobs-matches", kwargs={"pk": job.id}))

    res = admin_client.get(reverse("jobs-logs", kwargs={"pk": job.id}))
    assert res.status_code == 200
    logs = res.json()
    assert len(logs) == 2
    assert logs[0]["match_score"] >= logs[1]["match_score"]

    res = admin_client.get(reverse("jobs-analytics"), {"service_id": job.service_id})
    assert res.status_code == 200
    stats = res.json()
    assert stats["total_matches"] == 2
    assert stats["selected_matches"] == 1
    assert stats["selection_rate"] == pytest.approx(50.0)
    assert stats["average_distance"] == pytest.approx(0.02)


@pytest.mark.django_db
def test_analytics_empty(admin_client):
    res = admin_client.get(reverse("jobs-analytics"))
    assert res.status_code == 200
    assert res.json() == {
        "total_matches": 0,
        "selected_matches": 0,
        "selection_rate": 0,
        "average_match_score": 0,
        "average_distance": 0,
        "average_rating": 0,
    }


@pytest.mark.django_db
def test_analytics_rejects_inverted_dates(admin_client):
    res = admin_client.get(reverse("jobs-analytics"), {
        "start_date": "2024-05-02T00:00:00Z", "end_date": "2024-05-01T00:00:00Z",
    })
    assert res.status_code == 400


@pytest.mark.django_db
def test_analytics_admin_only(customer_client):
    res = customer_client.get(reverse("jobs-analytics"))
    assert res.status_code == 403


@pytest.mark.django_db
def test_cost_estimate(api_client, category):
    res = api_client.get(reverse("cost-estimate"), {"service_id": category.id, "description": "Leaking pipe"})
    assert res.status_code == 200
    data = res.json()
    rng = data["estimated_range"]
    assert data["service_name"] == "Plumbing"
    assert 4000 <= rng["min"] <= 6000
    assert rng["min"] < rng["max"]
    assert rng["currency"] == "NGN"
    assert 0.7 <= data["confidence"] <= 0.9
    assert "Job description analysis" in data["factors"]
    assert "Photo-based assessment" not in data["factors"]
    assert data["estimated_duration"] == {"min": 1, "max": 4}


@pytest.mark.django_db
def test_cost_estimate_unknown_service(api_client):
    res = api_client.get(reverse("cost-estimate"), {"service_id": 4242})
    assert res.status_code == 404


@pytest.mark.django_db
def test_categories_are_public(api_client, category):
    res = api_client.get(reverse("categories-list"))
    assert res.status_code == 200
    assert [c["name"] for c in res.json()] == ["Plumbing"]


@pytest.mark.django_db
def test_register_device(customer_client, customer):
    res = customer_client.post(reverse("devices-list"),
                               {"device_token": "fcm-token-123", "device_type": "android"}, format="json")
    assert res.status_code == 201, res.content
    device = Device.objects.get(device_token="fcm-token-123")
    assert device.user == customer
    assert device.is_active


@pytest.mark.django_db
def test_artisan_goes_online_with_position(api_client, make_artisan):
    profile = make_artisan(online=False)
    api_client.force_authenticate(user=profile.user)
    res = api_client.post(reverse("artisans-update-status"),
                          {"is_online": True, "latitude": 6.6, "longitude": 3.35}, format="json")
    assert res.status_code == 200
    profile = ArtisanProfile.objects.get(pk=profile.pk)
    assert profile.is_online
    assert profile.last_seen is not None
    assert (profile.latitude, profile.longitude) == (6.6, 3.35)


@pytest.mark.django_db
def test_artisan_status_needs_both_coordinates(api_client, artisan_profile):
    api_client.force_authenticate(user=artisan_profile.user)
    res = api_client.post(reverse("artisans-update-status"), {"latitude": 6.6}, format="json")
    assert res.status_code == 400


@pytest.mark.django_db
def test_customer_cannot_update_artisan_status(customer_client):
    res = customer_client.post(reverse("artisans-update-status"), {"is_online": True}, format="json")
    assert res.status_code == 403


def test_database_errors_become_dependency_failures():
    res = marketplace_exception_handler(DatabaseError("connection lost"), {"view": None})
    assert res.status_code == 503
