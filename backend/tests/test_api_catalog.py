"""
Tests d'intégration API pour les catalogues (problèmes types, types d'appareils).
"""

from unittest.mock import patch

from ticketing.exceptions import ConflictError, NotFoundError
from ticketing.schemas.batch import DeviceTypeResponse
from ticketing.schemas.issue import IssueResponse


def test_list_issues(client, staff_headers):
    with patch("ticketing.routers.issues.catalog_service.get_issues") as mock:
        mock.return_value = [IssueResponse(id=1, name="Écran noir", category="Hardware")]
        response = client.get("/api/v1/issues?category=Hardware&search=ecran", headers=staff_headers)

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Écran noir"
    mock.assert_called_once()
    assert mock.call_args[0][1:] == ("Hardware", "ecran")


def test_create_issue_categorie_invalide(client, admin_headers):
    response = client.post("/api/v1/issues", headers=admin_headers, json={"name": "Réseau", "category": "Network"})
    assert response.status_code == 422


def test_create_issue_doublon(client, admin_headers):
    with patch("ticketing.routers.issues.catalog_service.create_issue") as mock:
        mock.side_effect = ConflictError("Le problème 'Écran noir' existe déjà.")
        response = client.post("/api/v1/issues", headers=admin_headers, json={"name": "Écran noir", "category": "Hardware"})
    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"


def test_create_issue_reserve_admin(client, staff_headers):
    response = client.post("/api/v1/issues", headers=staff_headers, json={"name": "X", "category": "Hardware"})
    assert response.status_code == 403


def test_delete_issue(client, admin_headers):
    with patch("ticketing.routers.issues.catalog_service.delete_issue") as mock:
        response = client.delete("/api/v1/issues/4", headers=admin_headers)
    assert response.status_code == 204
    mock.assert_called_once()


def test_delete_issue_introuvable(client, admin_headers):
    with patch("ticketing.routers.issues.catalog_service.delete_issue") as mock:
        mock.side_effect = NotFoundError("Problème introuvable.")
        response = client.delete("/api/v1/issues/404", headers=admin_headers)
    assert response.status_code == 404


def test_device_types(client, admin_headers):
    with patch("ticketing.routers.device_types.catalog_service.get_device_types") as mock:
        mock.return_value = [DeviceTypeResponse(id=1, name="Laptop")]
        response = client.get("/api/v1/device-types", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == [{"id": 1, "name": "Laptop"}]


def test_create_device_type_nom_vide(client, admin_headers):
    response = client.post("/api/v1/device-types", headers=admin_headers, json={"name": "  "})
    assert response.status_code == 422


def test_delete_device_type(client, admin_headers):
    with patch("ticketing.routers.device_types.catalog_service.delete_device_type") as mock:
        response = client.delete("/api/v1/device-types/Laptop", headers=admin_headers)
    assert response.status_code == 204
    assert mock.call_args[0][1] == "Laptop"
