class RowNotFound(ValueError):
    pass


class RowConflict(ValueError):
    pass
