import time
import logging
import re
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger('access')


# 요청 로그 기록 대상 경로 패턴 (API 경로만)
ACCESS_LOG_PATTERNS = [
    r'^/api/menus',
]

# 제외할 경로 (문서, 정적 파일 등)
ACCESS_LOG_EXCLUDE_PATTERNS = [
    r'^/api/schema',
    r'^/api/docs',
    r'^/admin',
    r'^/health',
    r'^/static',
]

# HTTP 메서드 → action 매핑
METHOD_ACTION_MAP = {
    'GET': 'VIEW',
    'POST': 'CREATE',
    'PUT': 'UPDATE',
    'PATCH': 'UPDATE',
    'DELETE': 'DELETE',
}


def get_action(method, path):
    """HTTP 메서드/경로에서 action 추출 (move, reorder 는 별도 구분)"""
    if method == 'PATCH':
        if path.rstrip('/').endswith('/move'):
            return 'MOVE'
        if path.rstrip('/').endswith('/reorder'):
            return 'REORDER'
    return METHOD_ACTION_MAP.get(method, 'VIEW')


def should_log_access(path):
    """요청 로그에 기록할 경로인지 확인"""
    # 제외 패턴 체크
    for pattern in ACCESS_LOG_EXCLUDE_PATTERNS:
        if re.match(pattern, path):
            return False

    # 포함 패턴 체크
    for pattern in ACCESS_LOG_PATTERNS:
        if re.match(pattern, path):
            return True

    return False


def get_client_ip(request):
    """클라이언트 IP 추출"""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


class AccessLogMiddleware(MiddlewareMixin):
    """메뉴 API 요청과 응답을 로깅하는 미들웨어"""

    def process_request(self, request):
        request.start_time = time.time()

    def process_response(self, request, response):
        path = request.get_full_path()
        path_without_query = path.split('?')[0]
        if not should_log_access(path_without_query):
            return response

        # 실행 시간 계산
        duration = time.time() - getattr(request, 'start_time', time.time())

        user = getattr(request, 'user', None)
        user_name = str(user) if user is not None and user.is_authenticated else 'Anonymous'

        message = (
            f"{get_client_ip(request)} {user_name} {request.method} {path} "
            f"{get_action(request.method, path_without_query)} {response.status_code} ({duration:.3f}s)"
        )

        if response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        return response
