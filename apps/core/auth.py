"""
호출자 신원(caller identity) 검증

모든 데이터 접근 함수는 request.user 같은 전역 상태를 직접 읽지 않고,
검증된 사용자 객체를 첫 번째 인자로 명시적으로 전달받습니다.

    services.list_transactions(request.user, ...)

신원이 없거나(None) 익명 사용자(AnonymousUser)이면 DB 에 접근하기 전에
AuthError 를 발생시킵니다.
"""

from django.core.exceptions import PermissionDenied


class AuthError(PermissionDenied):
    """호출자 신원이 없거나 인증되지 않음"""

    def __init__(self, message='authentication required'):
        super().__init__(message)


def require_user(user):
    """인증된 사용자만 통과, 나머지는 AuthError"""
    if user is None or not getattr(user, 'is_authenticated', False) or user.pk is None:
        raise AuthError()
    return user
