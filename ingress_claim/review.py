"""
AdmissionReview envelope
Only the fields the webhook reads or writes are modelled; unknown fields are kept
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

ADMISSION_API_VERSION = 'admission.k8s.io/v1'


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='allow')


class GroupVersionResource(_Model):
    group: str = ''
    version: str = ''
    resource: str = ''

    def __str__(self):
        return f"{self.group}/{self.version}, Resource={self.resource}"


class GroupVersionKind(_Model):
    group: str = ''
    version: str = ''
    kind: str = ''


class UserInfo(_Model):
    username: str = ''


class AdmissionRequest(_Model):
    uid: str = ''
    kind: Optional[GroupVersionKind] = None
    resource: GroupVersionResource = Field(default_factory=GroupVersionResource)
    name: str = ''
    namespace: str = ''
    operation: str = ''
    user_info: UserInfo = Field(default_factory=UserInfo, alias='userInfo')
    object: Optional[Any] = None
    old_object: Optional[Any] = Field(default=None, alias='oldObject')
    dry_run: Optional[bool] = Field(default=None, alias='dryRun')


class Status(_Model):
    code: Optional[int] = None
    message: str = ''
    reason: str = ''


class AdmissionResponse(_Model):
    uid: str = ''
    allowed: bool
    status: Optional[Status] = None


class AdmissionReview(_Model):
    api_version: str = Field(default=ADMISSION_API_VERSION, alias='apiVersion')
    kind: str = 'AdmissionReview'
    request: Optional[AdmissionRequest] = None
    response: Optional[AdmissionResponse] = None
