"""
Record lookup shared by the services.

Every operation accepts either a model instance or its primary key and
re-reads the row itself, so a stale instance passed by the caller is
never trusted for a mutation.
"""

from lotman.exceptions import LedgerError


def pk_of(ref):
    """Primary key of an instance, or the value itself."""
    return getattr(ref, 'pk', ref)


def fetch(model, ref, *, lock=False, related=()):
    """
    Load a row by instance or pk.

    Args:
        model: Model class
        ref: Instance or primary key
        lock: Lock the row with select_for_update() (inside a transaction)
        related: select_related() paths

    Raises:
        LedgerError('NOT_FOUND'): If no such row exists
    """
    qs = model.objects.all()
    if related:
        qs = qs.select_related(*related)
    if lock:
        # Joined rows may sit on the nullable side of an outer join
        qs = qs.select_for_update(of=('self',)) if related else qs.select_for_update()
    try:
        return qs.get(pk=pk_of(ref))
    except model.DoesNotExist:
        raise LedgerError(
            'NOT_FOUND',
            f"{model._meta.verbose_name} not found",
            model=model.__name__,
            pk=pk_of(ref),
        ) from None
