"""
Tests d'intégration API pour les comptes école et les fichiers stockés.
"""

from unittest.mock import patch

from ticketing.exceptions import ConflictError, NotFoundError
from ticketing.schemas.school import SchoolDirectoryEntry, SchoolResponse

SCHOOL_PAYLOAD = {
    "username": "rizal_es",
    "password": "s3cret",
    "district": "District I",
    "school_code": "101234",
    "school": "Rizal Elementary School",
}


# ============================================================
# /api/v1/schools
# ============================================================

def test_create_school(client, admin_headers):
    with patch("ticketing.routers.schools.school_service.create_school") as mock:
        mock.return_value = SchoolResponse(
            id=2, username="rizal_es", school="Rizal Elementary School", school_code="101234", district="District I"
        )
        response = client.post("/api/v1/schools", headers=admin_headers, json=SCHOOL_PAYLOAD)

    assert response.status_code == 201
    assert "password" not in response.json()


def test_create_school_doublon(client, admin_headers):
    with patch("ticketing.routers.schools.school_service.create_school") as mock:
        mock.side_effect = ConflictError("Le nom d'utilisateur 'rizal_es' est déjà utilisé.")
        response = client.post("/api/v1/schools", headers=admin_headers, json=SCHOOL_PAYLOAD)
    assert response.status_code == 409


def test_create_school_reserve_admin(client, staff_headers):
    response = client.post("/api/v1/schools", headers=staff_headers, json=SCHOOL_PAYLOAD)
    assert response.status_code == 403


def test_annuaire_public(client):
    with patch("ticketing.routers.schools.school_service.get_school_directory") as mock:
        mock.return_value = [SchoolDirectoryEntry(school_code="101234", school="Rizal Elementary School")]
        response = client.get("/api/v1/schools/directory")

    assert response.status_code == 200
    assert response.json()[0]["school_code"] == "101234"


def test_reset_password_ecole_inconnue(client, admin_headers):
    with patch("ticketing.routers.schools.school_service.reset_school_password") as mock:
        mock.side_effect = NotFoundError("Aucun compte pour l'école 'X'.")
        response = client.post("/api/v1/schools/reset-password", headers=admin_headers, json={"school": "X"})
    assert response.status_code == 404


def test_reset_password(client, admin_headers):
    with patch("ticketing.routers.schools.school_service.reset_school_password") as mock:
        mock.return_value = 2
        response = client.post(
            "/api/v1/schools/reset-password", headers=admin_headers, json={"school": "Rizal Elementary School"}
        )
    assert response.status_code == 200
    assert "2 compte(s)" in response.json()["message"]


# ============================================================
# /api/v1/uploads et /api/v1/account-uploads
# ============================================================

def test_telechargement_piece_jointe(client, staff_headers, upload_dirs):
    tickets_dir, _ = upload_dirs
    tickets_dir.mkdir()
    (tickets_dir / "1-abcdefghi.png").write_bytes(b"\x89PNG")

    response = client.get("/api/v1/uploads/1-abcdefghi.png", headers=staff_headers)
    assert response.status_code == 200
    assert response.content == b"\x89PNG"


def test_piece_jointe_absente(client, staff_headers, upload_dirs):
    response = client.get("/api/v1/uploads/absent.png", headers=staff_headers)
    assert response.status_code == 404


def test_justificatif_reserve_admin(client, staff_headers, upload_dirs):
    response = client.get("/api/v1/account-uploads/prc_id-1-abc.pdf", headers=staff_headers)
    assert response.status_code == 403
