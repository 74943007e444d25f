"""Lot domain constants.

Defines the lot and lot-order statuses, work modes and the lot state
machine::

    DRAFT -> IN_PROGRESS -> CLOSING -> DONE                    (GERAL)
    DRAFT -> IN_PROGRESS -> READY_FOR_SCAN -> CLOSING -> DONE  (SEPARADOR, BIPADOR)

``READY_FOR_SCAN`` only appears in split-role lots, while the lot waits for
a scanner to claim it.
"""

from django.db import models


class LotStatus(models.TextChoices):
    DRAFT = "DRAFT", "Rascunho"
    IN_PROGRESS = "IN_PROGRESS", "Em Andamento"
    READY_FOR_SCAN = "READY_FOR_SCAN", "Aguardando Bipagem"
    CLOSING = "CLOSING", "Encerrando Pedidos"
    DONE = "DONE", "Concluído"


class LotOrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pendente"
    SEALED = "SEALED", "Lacrado"


class WorkMode(models.TextChoices):
    GERAL = "GERAL", "Geral"
    SEPARADOR = "SEPARADOR", "Separador"
    BIPADOR = "BIPADOR", "Bipador"


class AssignmentType(models.TextChoices):
    OPEN = "OPEN", "Aberto"
    ASSIGNED_GENERAL = "ASSIGNED_GENERAL", "Atribuído (geral)"
    ASSIGNED_SEPARATED = "ASSIGNED_SEPARATED", "Atribuído (separado)"


VALID_TRANSITIONS: dict[str, set[str]] = {
    LotStatus.DRAFT: {LotStatus.IN_PROGRESS},
    LotStatus.IN_PROGRESS: {LotStatus.CLOSING, LotStatus.READY_FOR_SCAN},
    LotStatus.READY_FOR_SCAN: {LotStatus.CLOSING},
    LotStatus.CLOSING: {LotStatus.DONE},
    LotStatus.DONE: set(),
}

TERMINAL_STATES: set[str] = {LotStatus.DONE}

SPLIT_WORK_MODES: set[str] = {WorkMode.SEPARADOR, WorkMode.BIPADOR}

# Work modes in which the creator starts out as the lot's separator.
CREATOR_SEPARATES_MODES: set[str] = {WorkMode.GERAL, WorkMode.SEPARADOR}
