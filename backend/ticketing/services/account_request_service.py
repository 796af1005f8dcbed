"""
Service des demandes de compte DepEd (création et réinitialisation).

Les workflows sont soumis par formulaire et administrés ensuite :
- création : formulaire + 3 justificatifs obligatoires (REQ-...)
- réinitialisation : formulaire JSON sans fichier (RST-...)
- réinitialisation IDAS : formulaire JSON d'un compte école, sans numéro ni statut
Pour REQ- et RST-, le demandeur suit l'avancement grâce au numéro retourné (lookup_transaction).
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from ticketing import clock
from ticketing.exceptions import NotFoundError, ValidationError
from ticketing.models.account_request import AccountRequest, AccountResetRequest, IdasResetRequest
from ticketing.models.enums import RequestStatus
from ticketing.schemas.account_request import (
    AccountRequestCreated,
    AccountRequestResponse,
    AccountRequestSubmission,
    IdasResetResponse,
    IdasResetSubmission,
    RequestStatusUpdate,
    ResetRequestCreate,
    ResetRequestCreated,
    ResetRequestResponse,
    TransactionStatus,
)
from ticketing.schemas.auth import TokenClaims
from ticketing.services import numbering
from ticketing.services.list_filter import (
    ACCOUNT_REQUEST_SEARCH_FIELDS,
    RESET_REQUEST_SEARCH_FIELDS,
    filter_records,
)
from ticketing.services.status_rules import apply_request_status

logger = logging.getLogger(__name__)

REQUIRED_DOCUMENTS = ("proof_of_identity", "prc_id", "endorsement_letter")


def format_full_name(surname: str, first_name: str, middle_name: Optional[str]) -> str:
    """Nom affiché : "Nom, Prénom Deuxième-prénom" (sans espace superflu)."""
    return f"{surname}, {first_name} {middle_name or ''}".strip()


def build_account_submission(form: Dict[str, Optional[str]]) -> AccountRequestSubmission:
    """
    Valide les champs texte du formulaire multipart.
    Les erreurs Pydantic sont regroupées dans une seule ValidationError.
    """
    try:
        return AccountRequestSubmission.model_validate(
            {key: value for key, value in form.items() if value is not None}
        )
    except PydanticValidationError as e:
        fields = [str(err["loc"][0]) for err in e.errors() if err["loc"]]
        raise ValidationError("Champs manquants ou invalides : " + ", ".join(fields), fields)


def check_required_documents(documents: Dict[str, Optional[str]]) -> None:
    """Lève ValidationError listant tous les justificatifs manquants."""
    missing = [name for name in REQUIRED_DOCUMENTS if not documents.get(name)]
    if missing:
        raise ValidationError("Justificatif(s) manquant(s) : " + ", ".join(missing), missing)


# --- Demandes de création ---

def create_account_request(
    db: Session,
    data: AccountRequestSubmission,
    documents: Dict[str, str],
) -> AccountRequestCreated:
    """
    Enregistre une demande (statut Pending).
    `documents` associe chaque justificatif à son nom de fichier stocké.
    """
    check_required_documents(documents)
    middle_name = (data.middle_name or "").strip()

    def attempt() -> AccountRequestCreated:
        request = AccountRequest(
            request_number=numbering.generate_request_number(),
            selected_type=data.selected_type,
            name=format_full_name(data.surname, data.first_name, middle_name),
            surname=data.surname,
            first_name=data.first_name,
            middle_name=middle_name,
            designation=data.designation,
            school=data.school,
            school_id=data.school_id,
            personal_gmail=str(data.personal_gmail),
            proof_of_identity=documents["proof_of_identity"],
            prc_id=documents["prc_id"],
            endorsement_letter=documents["endorsement_letter"],
            status=RequestStatus.PENDING.value,
        )
        db.add(request)
        db.commit()
        db.refresh(request)
        logger.info("Demande de compte %s enregistrée pour %s", request.request_number, request.school)
        return AccountRequestCreated(request_id=request.id, request_number=request.request_number)

    return numbering.create_with_unique_number(db, attempt, "demande de compte")


def get_account_requests(
    db: Session,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[AccountRequestResponse]:
    """Liste les demandes de la plus ancienne à la plus récente (file de traitement)."""
    requests = db.execute(
        select(AccountRequest).order_by(AccountRequest.created_at, AccountRequest.id)
    ).scalars().all()
    responses = [AccountRequestResponse.model_validate(r) for r in requests]
    return filter_records(responses, status, search, ACCOUNT_REQUEST_SEARCH_FIELDS)


def update_account_request_status(
    db: Session,
    request_id: int,
    data: RequestStatusUpdate,
    now: Optional[datetime] = None,
) -> AccountRequestResponse:
    request = db.get(AccountRequest, request_id)
    if request is None:
        raise NotFoundError("Demande de compte introuvable.")

    apply_request_status(request, data.status, now or clock.now(), data.notes)
    db.commit()
    db.refresh(request)
    logger.info("Demande %s → %s", request.request_number, request.status)
    return AccountRequestResponse.model_validate(request)


# --- Demandes de réinitialisation ---

def create_reset_request(db: Session, data: ResetRequestCreate) -> ResetRequestCreated:
    middle_name = (data.middle_name or "").strip()

    def attempt() -> ResetRequestCreated:
        request = AccountResetRequest(
            reset_number=numbering.generate_reset_number(),
            selected_type=data.selected_type,
            name=format_full_name(data.surname, data.first_name, middle_name),
            surname=data.surname,
            first_name=data.first_name,
            middle_name=middle_name,
            school=data.school,
            school_id=data.school_id,
            employee_number=data.employee_number,
            status=RequestStatus.PENDING.value,
        )
        db.add(request)
        db.commit()
        db.refresh(request)
        logger.info("Demande de réinitialisation %s enregistrée pour %s", request.reset_number, request.school)
        return ResetRequestCreated(request_id=request.id, reset_number=request.reset_number)

    return numbering.create_with_unique_number(db, attempt, "réinitialisation")


def get_reset_requests(
    db: Session,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[ResetRequestResponse]:
    requests = db.execute(
        select(AccountResetRequest).order_by(AccountResetRequest.created_at, AccountResetRequest.id)
    ).scalars().all()
    responses = [ResetRequestResponse.model_validate(r) for r in requests]
    return filter_records(responses, status, search, RESET_REQUEST_SEARCH_FIELDS)


def update_reset_request_status(
    db: Session,
    request_id: int,
    data: RequestStatusUpdate,
    now: Optional[datetime] = None,
) -> ResetRequestResponse:
    request = db.get(AccountResetRequest, request_id)
    if request is None:
        raise NotFoundError("Demande de réinitialisation introuvable.")

    apply_request_status(request, data.status, now or clock.now(), data.notes)
    db.commit()
    db.refresh(request)
    logger.info("Réinitialisation %s → %s", request.reset_number, request.status)
    return ResetRequestResponse.model_validate(request)


# --- Réinitialisations IDAS ---

IDAS_RESET_FIELDS = ("name", "school", "school_id", "employee_number")


def create_idas_reset_request(
    db: Session,
    data: IdasResetSubmission,
    user: TokenClaims,
) -> IdasResetResponse:
    """Enregistre la demande IDAS au nom du compte école connecté."""
    values = {name: (getattr(data, name) or "").strip() for name in IDAS_RESET_FIELDS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError("Champs obligatoires manquants : " + ", ".join(missing), missing)

    request = IdasResetRequest(requested_by=user.username, **values)
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("Réinitialisation IDAS demandée par %s pour %s", user.username, request.employee_number)
    return IdasResetResponse.model_validate(request)


def get_idas_reset_requests(db: Session) -> List[IdasResetResponse]:
    requests = db.execute(
        select(IdasResetRequest).order_by(IdasResetRequest.created_at.desc(), IdasResetRequest.id.desc())
    ).scalars().all()
    return [IdasResetResponse.model_validate(r) for r in requests]


# --- Suivi public ---

def lookup_transaction(db: Session, number: str) -> TransactionStatus:
    """
    Retrouve une demande par son numéro. Le préfixe choisit la table :
    REQ- pour une création, RST- pour une réinitialisation.
    Le préfixe est sensible à la casse : "req-..." est rejeté.
    """
    number = (number or "").strip()
    if number.startswith(numbering.REQUEST_PREFIX):
        request = db.execute(
            select(AccountRequest).where(AccountRequest.request_number == number)
        ).scalar_one_or_none()
        kind = "account_request"
    elif number.startswith(numbering.RESET_PREFIX):
        request = db.execute(
            select(AccountResetRequest).where(AccountResetRequest.reset_number == number)
        ).scalar_one_or_none()
        kind = "reset_request"
    else:
        raise ValidationError(
            f"Numéro de transaction invalide : préfixe attendu "
            f"{numbering.REQUEST_PREFIX} ou {numbering.RESET_PREFIX}.",
            ["number"],
        )

    if request is None:
        raise NotFoundError(f"Aucune demande ne correspond au numéro {number}.")

    return TransactionStatus(
        kind=kind,
        number=number,
        name=request.name,
        school=request.school,
        status=request.status,
        notes=request.notes,
    )
