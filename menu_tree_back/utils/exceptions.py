from rest_framework.exceptions import APIException
from rest_framework import status
from django.utils import timezone


class MenuTreeException(APIException):
    """메뉴 트리 프로젝트 기본 예외 클래스"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'ERR_500'
    default_detail = '서버 내부 오류가 발생했습니다.'

    def __init__(self, code=None, message=None, detail=None, field=None, status_code=None):
        super().__init__(detail=message or self.default_detail)
        self.code = code or self.default_code
        self.message = message or self.default_detail
        self.detail_info = detail
        self.field = field
        if status_code:
            self.status_code = status_code

    def get_full_details(self):
        error_detail = {
            'code': self.code,
            'message': self.message,
            'timestamp': timezone.now().isoformat()
        }
        if self.detail_info:
            error_detail['detail'] = self.detail_info
        if self.field:
            error_detail['field'] = self.field
        return {'error': error_detail}


class ValidationException(MenuTreeException):
    """유효성 검증 실패 예외"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'ERR_101'
    default_detail = '입력값이 올바르지 않습니다.'


class InvalidOperationException(MenuTreeException):
    """허용되지 않는 트리 조작 예외 (자기 자신/하위 메뉴를 부모로 지정)"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'ERR_102'
    default_detail = '허용되지 않는 작업입니다.'


class ResourceNotFoundException(MenuTreeException):
    """리소스 없음 예외"""
    status_code = status.HTTP_404_NOT_FOUND
    default_code = 'ERR_201'
    default_detail = '요청한 리소스를 찾을 수 없습니다.'
