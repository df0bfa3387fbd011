import logging
from dataclasses import dataclass
from typing import Optional

import boto3
import firebase_admin
from botocore.config import Config
from firebase_admin import credentials

from config import Settings
from services.firestore import FirestoreDB
from services.posts import PostService
from services.s3 import S3Service
from services.users import UserService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request handler needs, built once per application"""
    settings: Settings
    firestore: FirestoreDB
    s3_service: S3Service
    post_service: PostService
    user_service: UserService
    firebase_app: Optional[firebase_admin.App] = None

    @classmethod
    def wire(cls, settings: Settings, firestore: FirestoreDB, s3_service: S3Service,
             firebase_app: Optional[firebase_admin.App] = None) -> "AppContext":
        return cls(
            settings=settings,
            firestore=firestore,
            s3_service=s3_service,
            post_service=PostService(firestore, s3_service),
            user_service=UserService(firestore, bcrypt_rounds=settings.bcrypt_rounds),
            firebase_app=firebase_app,
        )

    def close(self):
        if self.firebase_app is not None:
            firebase_admin.delete_app(self.firebase_app)
            self.firebase_app = None


def build_context(settings: Settings) -> AppContext:
    """Connect to Firestore and S3 using the given settings"""
    cred = credentials.Certificate(settings.firebase_credentials)
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    firebase_app = firebase_admin.initialize_app(cred, options)

    s3_client = boto3.client(
        's3',
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region,
        config=Config(signature_version="s3v4")
    )
    s3 = S3Service(settings.s3_bucket_name, s3_client, settings.aws_region, settings.media_max_size_mb)

    logger.info("Connected to Firestore and S3 bucket '%s'", settings.s3_bucket_name)
    return AppContext.wire(settings, FirestoreDB(firebase_app), s3, firebase_app)
