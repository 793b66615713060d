from __future__ import annotations


class CollectionError(Exception):
    pass


class InvalidQueryError(CollectionError):
    def __init__(self, param: str, detail: str):
        self.param = param
        self.detail = detail
        super().__init__(f'Invalid value for query parameter "{param}": {detail}')


class UnsupportedOperationError(CollectionError):
    def __init__(self, operation: object):
        self.operation = operation
        super().__init__(f"Unsupported bulk operation: {operation!r}")


class RecordValidationError(CollectionError):
    pass


class RecordNotFoundError(CollectionError):
    def __init__(self, record_id: object):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class DuplicateRecordError(CollectionError):
    def __init__(self, record_id: object):
        self.record_id = record_id
        super().__init__(f"Record already exists: {record_id}")
