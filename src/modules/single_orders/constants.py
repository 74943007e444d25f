"""Single-order domain constants.

A single order is separated and sealed by one worker end-to-end::

    DRAFT -> SEPARATING -> READY_TO_SCAN -> SCANNING -> DONE
"""

from django.db import models


class SingleOrderStatus(models.TextChoices):
    DRAFT = "DRAFT", "Rascunho"
    SEPARATING = "SEPARATING", "Separando"
    READY_TO_SCAN = "READY_TO_SCAN", "Pronto para Bipar"
    SCANNING = "SCANNING", "Bipando"
    DONE = "DONE", "Concluído"


VALID_TRANSITIONS: dict[str, set[str]] = {
    SingleOrderStatus.DRAFT: {SingleOrderStatus.SEPARATING},
    SingleOrderStatus.SEPARATING: {SingleOrderStatus.READY_TO_SCAN},
    SingleOrderStatus.READY_TO_SCAN: {SingleOrderStatus.SCANNING},
    SingleOrderStatus.SCANNING: {SingleOrderStatus.DONE},
    SingleOrderStatus.DONE: set(),
}
