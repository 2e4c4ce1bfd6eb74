"""
JSON 엔드포인트 공통 처리

- json_endpoint: 인증 확인 + 에러 → JSON 응답 변환
- parse_json_body: 요청 본문(JSON 객체) 파싱
"""
import json
import logging
from functools import wraps

from django.core.exceptions import ValidationError
from django.http import JsonResponse

from .auth import AuthError, require_user

logger = logging.getLogger(__name__)


def validation_error_dict(error):
    """ValidationError → {필드: [메시지, ...]}"""
    if hasattr(error, 'error_dict'):
        return error.message_dict
    return {'__all__': error.messages}


def json_endpoint(view_func):
    """
    JSON API 뷰 데코레이터

    - 로그인 안 된 요청은 뷰 실행 전에 401 (fail closed)
      HTTP 메서드 제한 데코레이터보다 바깥에 둬야 405 보다 401 이 먼저 나감
    - ValidationError 는 400 + 필드별 에러
    - 그 외 예외(DB 오류 등)는 그대로 전파
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            require_user(request.user)
            return view_func(request, *args, **kwargs)
        except AuthError as e:
            return JsonResponse({'error': str(e)}, status=401)
        except ValidationError as e:
            errors = validation_error_dict(e)
            logger.info(f"잘못된 요청: {request.method} {request.path} {errors}")
            return JsonResponse({'errors': errors}, status=400)
    return wrapper


def parse_json_body(request):
    """본문을 JSON 객체(dict)로 파싱, 실패 시 ValidationError"""
    try:
        data = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        raise ValidationError('Request body is not valid JSON.')
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data
