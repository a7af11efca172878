"""Docker镜像仓库REST API访问"""

import json
from typing import Any, Optional

import requests
from loguru import logger

from ...constants import DEFAULT_REGISTRY_URL, ERROR_MESSAGES, REGISTRY_PATHS
from .base import (
    AuthError,
    ImageReference,
    RegistryCredentials,
    RegistryLookupError,
    RegistryTagsPage,
    RepositoryTagInfo,
    SessionToken,
    TransportError,
)
from .utils import bearer_headers, decode_tag, decode_tags_page


def is_response_successful(response: requests.Response) -> bool:
    """状态码是否为2xx"""
    return 200 <= response.status_code < 300


class RegistryClient:
    """Docker镜像仓库客户端，负责查询标签信息和换取会话令牌"""

    def __init__(
        self,
        uri: str = DEFAULT_REGISTRY_URL,
        credentials: Optional[RegistryCredentials] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        初始化仓库客户端

        Args:
            uri: 仓库REST API地址，例如 https://hub.docker.com/v2
            credentials: 用户名和访问令牌，令牌为空时匿名访问
            session: HTTP会话，默认新建requests.Session
            timeout: 请求超时时间（秒），默认不限制
        """
        self.uri = uri.rstrip("/")
        self.credentials = credentials
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self._token: Optional[SessionToken] = None
        self._authenticated = False

    def close(self) -> None:
        """关闭自行创建的HTTP会话，外部传入的会话由调用方负责"""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RegistryClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def token(self) -> Optional[SessionToken]:
        """当前缓存的会话令牌"""
        return self._token

    def get_tag(self, image: ImageReference) -> RepositoryTagInfo:
        """
        获取标签信息，包含该标签下所有操作系统/架构的镜像

        Args:
            image: 镜像引用

        Returns:
            RepositoryTagInfo: 标签信息

        Raises:
            RegistryLookupError: 响应失败或为空时抛出
        """
        url = REGISTRY_PATHS["tag"].format(uri=self.uri, repository=image.repository, tag=image.tag)
        payload = self._get_json(url)
        return decode_tag(payload)

    def list_tags(self, repository: str, page_size: int) -> RegistryTagsPage:
        """
        获取仓库中的标签列表

        Args:
            repository: 仓库名
            page_size: 响应中包含的最大标签数量

        Returns:
            RegistryTagsPage: 标签列表

        Raises:
            RegistryLookupError: 响应失败或为空时抛出
        """
        url = REGISTRY_PATHS["tags"].format(uri=self.uri, repository=repository)
        payload = self._get_json(url, params={"page_size": page_size})
        return decode_tags_page(payload)

    def authenticate(self, username: str, secret: str) -> SessionToken:
        """
        用用户名和访问令牌换取会话令牌，私有仓库只能用会话令牌访问
        参见: https://docs.docker.com/docker-hub/api/latest/#tag/authentication/operation/PostUsersLogin

        Args:
            username: Docker Hub用户名
            secret: Docker Hub上生成的访问令牌，也可以是密码

        Returns:
            SessionToken: 会话令牌

        Raises:
            AuthError: 凭据不正确时抛出
            TransportError: 响应失败或为空时抛出
        """
        url = REGISTRY_PATHS["login"].format(uri=self.uri)
        logger.info(f"正在获取会话令牌，用户名: {username}")
        response = self._send("post", url, json={"username": username, "password": secret})

        if response.status_code == 401:
            raise AuthError(ERROR_MESSAGES["token_unauthorized"].format(response.text))
        if not is_response_successful(response) or not response.text:
            raise TransportError(ERROR_MESSAGES["token_failed"].format(response.status_code))

        try:
            token = json.loads(response.text).get("token")
        except (ValueError, AttributeError) as e:
            raise TransportError(ERROR_MESSAGES["token_failed"].format(response.status_code)) from e
        if not token:
            raise TransportError(ERROR_MESSAGES["token_missing"])

        self._token = SessionToken(str(token))
        self._authenticated = True
        logger.debug("会话令牌获取成功")
        return self._token

    def _ensure_token(self) -> Optional[SessionToken]:
        """首次请求时换取会话令牌，之后复用"""
        if self._authenticated:
            return self._token

        if self.credentials is not None and self.credentials.token:
            if not self.credentials.username:
                raise AuthError(ERROR_MESSAGES["username_missing"])
            self.authenticate(self.credentials.username, self.credentials.token)
        self._authenticated = True
        return self._token

    def _get_json(self, url: str, params: Optional[dict] = None) -> Any:
        token = self._ensure_token()
        response = self._send(
            "get", url, params=params, headers=bearer_headers(token.value if token else None)
        )
        body = response.text or ""

        if not is_response_successful(response) or not body:
            raise RegistryLookupError(
                ERROR_MESSAGES["lookup_failed"].format(f"{url} -> {response.status_code}"),
                response=response,
            )
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise RegistryLookupError(
                ERROR_MESSAGES["lookup_failed"].format(f"{url} -> 无效的JSON"), response=response
            ) from e
        if not isinstance(payload, dict):
            raise RegistryLookupError(
                ERROR_MESSAGES["lookup_failed"].format(f"{url} -> 响应不是JSON对象"), response=response
            )
        return payload

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug(f"{method.upper()} {url}")
        try:
            return getattr(self.session, method)(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(ERROR_MESSAGES["transport_failed"].format(e)) from e
