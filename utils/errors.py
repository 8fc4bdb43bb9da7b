"""
Errors Module - Error kinds surfaced by remote procedures
"""

ERROR_STATUS = {
    'BAD_REQUEST': 400,
    'UNAUTHORIZED': 401,
    'FORBIDDEN': 403,
    'NOT_FOUND': 404,
    'METHOD_NOT_SUPPORTED': 405,
    'CONFLICT': 409,
    'INTERNAL_SERVER_ERROR': 500,
}


class ApiError(Exception):
    """Error raised by a procedure and returned to the caller as-is.

    Args:
        code (str): one of ERROR_STATUS keys
        message (str): human readable message
        issues (list, optional): field level problems, ``[{'field', 'message'}]``
        cause (str, optional): extra detail for logs
    """

    def __init__(self, code, message, issues=None, cause=None):
        if code not in ERROR_STATUS:
            raise ValueError(f"Unknown error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.issues = issues or []
        self.cause = cause

    @property
    def status_code(self):
        return ERROR_STATUS[self.code]

    def to_dict(self):
        payload = {'code': self.code, 'message': self.message}
        if self.issues:
            payload['issues'] = self.issues
        return payload

    def __repr__(self):
        return f"ApiError({self.code!r}, {self.message!r})"


def from_validation_error(exc):
    """Convert a pydantic ValidationError into a BAD_REQUEST ApiError"""
    issues = []
    for err in exc.errors():
        loc = [str(part) for part in err.get('loc', ()) if part != '__root__']
        field = '.'.join(loc) or (err.get('ctx') or {}).get('field') or '_'
        message = err.get('msg', 'Invalid value')
        # pydantic prefixes messages raised from validators
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        issues.append({'field': field, 'message': message})
    summary = '; '.join(f"{i['field']}: {i['message']}" for i in issues)
    return ApiError('BAD_REQUEST', summary or 'Invalid input', issues=issues)


__all__ = ['ApiError', 'ERROR_STATUS', 'from_validation_error']
