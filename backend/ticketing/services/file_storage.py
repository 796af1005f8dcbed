"""
Stockage des pièces jointes sur disque.

Les fichiers sont renommés (horodatage + suffixe aléatoire, extension d'origine conservée)
et seul le nom généré est enregistré en base. Contrôles : liste blanche de types MIME et
taille maximale par fichier. Aucun autre contrôle de contenu.
"""

import logging
import os
import secrets
import string
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

from fastapi import UploadFile

from ticketing.config import settings
from ticketing.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TICKET_ALLOWED_TYPES = {
    "image/jpeg",
    "image/png",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

ACCOUNT_ALLOWED_TYPES = {
    "image/jpeg",
    "image/png",
    "application/pdf",
    "application/msword",
}

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class IncomingFile:
    """Fichier reçu, déjà lu en mémoire par le router."""
    filename: str
    content_type: Optional[str]
    content: bytes
    field: str = "attachments"


def max_size_bytes() -> int:
    return settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024


def validate_files(files: Iterable[IncomingFile], allowed_types: set) -> None:
    """
    Vérifie type MIME et taille de chaque fichier.
    Lève ValidationError listant tous les fichiers refusés, pas seulement le premier.
    """
    problems: List[str] = []
    fields: List[str] = []
    for f in files:
        if f.content_type not in allowed_types:
            problems.append(f"{f.filename} : type de fichier non autorisé ({f.content_type})")
            fields.append(f.field)
        elif len(f.content) > max_size_bytes():
            problems.append(f"{f.filename} : taille maximale {settings.MAX_UPLOAD_SIZE_MB} Mo dépassée")
            fields.append(f.field)
    if problems:
        raise ValidationError("Fichier(s) refusé(s) : " + " ; ".join(problems), fields)


def generate_filename(original: str, prefix: str = "") -> str:
    """Nom de stockage : [prefix-]<ms>-<9 caractères aléatoires><extension>."""
    _, ext = os.path.splitext(original or "")
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    stem = f"{int(time.time() * 1000)}-{suffix}"
    return f"{prefix}-{stem}{ext.lower()}" if prefix else f"{stem}{ext.lower()}"


def save_files(files: Iterable[IncomingFile], directory: str, prefix_with_field: bool = False) -> List[str]:
    """Écrit les fichiers dans `directory` et retourne les noms générés, dans l'ordre."""
    os.makedirs(directory, exist_ok=True)
    saved: List[str] = []
    try:
        for f in files:
            name = generate_filename(f.filename, f.field if prefix_with_field else "")
            with open(os.path.join(directory, name), "wb") as out:
                out.write(f.content)
            saved.append(name)
    except OSError:
        remove_files(saved, directory)
        raise
    return saved


def remove_files(names: Iterable[str], directory: str) -> None:
    """Supprime des fichiers déjà enregistrés (annulation d'une création échouée)."""
    for name in names:
        try:
            os.remove(os.path.join(directory, name))
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.error("Suppression impossible de %s : %s", name, exc)


def resolve_stored_file(name: str, directory: str) -> str:
    """Chemin absolu d'un fichier stocké ; refuse les noms qui sortent du répertoire."""
    if not name or os.path.basename(name) != name or name in (".", ".."):
        raise NotFoundError("Fichier introuvable.")
    path = os.path.join(directory, name)
    if not os.path.isfile(path):
        raise NotFoundError("Fichier introuvable.")
    return path


async def read_uploads(uploads: Optional[List[UploadFile]], field: str) -> List[IncomingFile]:
    """Lit les fichiers reçus en mémoire ; les entrées sans nom (champ vide) sont ignorées."""
    files = []
    for upload in uploads or []:
        if not upload.filename:
            continue
        files.append(IncomingFile(
            filename=upload.filename,
            content_type=upload.content_type,
            content=await upload.read(),
            field=field,
        ))
    return files
