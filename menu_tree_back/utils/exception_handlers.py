from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from django.utils import timezone
from .exceptions import MenuTreeException, ValidationException
import logging

logger = logging.getLogger(__name__)


def _flatten_messages(errors):
    """serializer.errors 값을 문자열 리스트로 변환"""
    if isinstance(errors, dict):
        messages = []
        for value in errors.values():
            messages.extend(_flatten_messages(value))
        return messages
    if isinstance(errors, (list, tuple)):
        messages = []
        for value in errors:
            messages.extend(_flatten_messages(value))
        return messages
    return [str(errors)]


def custom_exception_handler(exc, context):
    """DRF 기본 핸들러 + 메뉴 트리 커스텀 핸들러"""

    # 프로젝트 커스텀 예외 처리
    if isinstance(exc, MenuTreeException):
        logger.warning(f"MenuTree Exception: {exc.code} - {exc.message}", extra={
            'code': exc.code,
            'detail': exc.detail_info,
            'field': exc.field,
            'view': context.get('view'),
        })
        return Response(exc.get_full_details(), status=exc.status_code)

    # DRF 기본 예외 처리 (ValidationError, NotFound, MethodNotAllowed 등)
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            # 필드별 메시지를 모두 담고, 첫 번째 필드는 field/detail 로도 노출
            error_detail = {
                'error': {
                    'code': ValidationException.default_code,
                    'message': ValidationException.default_detail,
                    'timestamp': timezone.now().isoformat()
                }
            }
            if isinstance(response.data, dict):
                fields = {
                    field: _flatten_messages(errors)
                    for field, errors in response.data.items()
                }
                error_detail['error']['fields'] = fields
                for field, messages in fields.items():
                    error_detail['error']['field'] = field
                    error_detail['error']['detail'] = messages[0] if messages else ''
                    break
            else:
                messages = _flatten_messages(response.data)
                if messages:
                    error_detail['error']['detail'] = messages[0]
        else:
            data = response.data if isinstance(response.data, dict) else {}
            error_detail = {
                'error': {
                    'code': 'ERR_500' if response.status_code >= 500 else f'HTTP_{response.status_code}',
                    'message': str(data.get('detail', '요청 처리 중 오류가 발생했습니다.')),
                    'timestamp': timezone.now().isoformat()
                }
            }

        response.data = error_detail
        logger.warning(f"DRF Exception: {error_detail['error']['code']} - {error_detail['error']['message']}")
        return response

    # 예상치 못한 예외 (500 에러)
    logger.error(f"Unexpected Exception: {str(exc)}", exc_info=True, extra={
        'view': context.get('view'),
    })

    return Response({
        'error': {
            'code': 'ERR_500',
            'message': '서버 내부 오류가 발생했습니다. 관리자에게 문의해주세요.',
            'timestamp': timezone.now().isoformat()
        }
    }, status=500)
