"""Cloud provider detection patterns.

This module contains patterns for credentials issued by cloud and hosting
providers: AWS, Google Cloud, Azure, Heroku, DigitalOcean, Netlify and
Docker registries.
"""

from sourcesecure.core.models import Severity
from sourcesecure.detectors.patterns import Pattern, PatternCategory

# AWS
AWS_ACCESS_KEY_ID = Pattern(
    name="AWS Access Key ID",
    regex=r"(?:A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16}",
    severity=Severity.CRITICAL,
    category=PatternCategory.CLOUD,
    description="AWS Access Key ID - identifies an IAM user or role credential",
)

# Matches only next to an aws_secret variable name
AWS_SECRET_KEY = Pattern(
    name="AWS Secret Key",
    regex=r"[0-9a-zA-Z/+=]{40}",
    severity=Severity.CRITICAL,
    category=PatternCategory.CLOUD,
    context=r"aws_secret|aws_secret_access_key",
    description="AWS Secret Access Key near an aws_secret assignment",
)

AWS_SESSION_TOKEN = Pattern(
    name="AWS Session Token",
    regex=r"(?i)aws[_\s-]?session[_\s-]?token[_\s-]?['\"]?\s*[:=]\s*['\"]?[a-zA-Z0-9/+=]{100,}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="AWS temporary session token assignment",
)

AWS_MWS_TOKEN = Pattern(
    name="AWS MWS Auth Token",
    regex=r"(?i)amzn\.mws\.[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="Amazon Marketplace Web Service auth token",
)

# Google
GOOGLE_API_KEY = Pattern(
    name="Google API Key",
    regex=r"AIza[0-9A-Za-z_-]{35}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="Google API Key",
)

GOOGLE_OAUTH_CLIENT = Pattern(
    name="Google OAuth",
    regex=r"[0-9]+-[0-9A-Za-z_]{32}\.apps\.googleusercontent\.com",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="Google OAuth client identifier",
)

GOOGLE_SERVICE_ACCOUNT = Pattern(
    name="Google Service Account",
    regex=r"(?i)\"type\"\s*:\s*\"service_account\"",
    severity=Severity.CRITICAL,
    category=PatternCategory.CLOUD,
    description="Google service account credential file marker",
)

GCP_API_KEY = Pattern(
    name="GCP API Key",
    regex=r"(?i)(?:gcp|google)[_\s-]?(?:api[_\s-]?)?key[_\s-]?['\"]?\s*[:=]\s*['\"]?[a-zA-Z0-9-]{39}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="Google Cloud API key assignment",
)

# Azure
AZURE_STORAGE_KEY = Pattern(
    name="Azure Storage Key",
    regex=r"(?i)(?:AccountKey|azureStorageAccessKey)[_\s-]?[=:]\s*[a-z0-9+/]{86}==",
    severity=Severity.CRITICAL,
    category=PatternCategory.CLOUD,
    description="Azure storage account key",
)

AZURE_SAS_TOKEN = Pattern(
    name="Azure SAS Token",
    regex=r"(?i)\?sv=[0-9]{4}-[0-9]{2}-[0-9]{2}&s[a-z]{1,2}=",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="Azure shared access signature URL",
)

AZURE_SERVICE_PRINCIPAL = Pattern(
    name="Azure Service Principal",
    regex=(
        r"(?i)(?:azure|tenant|subscription)[_\s-]?(?:client[_\s-]?)?(?:id|secret)[_\s-]?['\"]?\s*[:=]\s*['\"]?"
        r"[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}"
    ),
    severity=Severity.CRITICAL,
    category=PatternCategory.CLOUD,
    description="Azure service principal identifier or secret",
)

# Hosting and registries
HEROKU_API_KEY = Pattern(
    name="Heroku API Key",
    regex=r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    context=r"heroku",
    description="UUID-shaped Heroku API key",
)

DIGITALOCEAN_TOKEN = Pattern(
    name="DigitalOcean Token",
    regex=r"dop_v1_[0-9a-f]{64}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    description="DigitalOcean personal access token",
)

NETLIFY_TOKEN = Pattern(
    name="Netlify Access Token",
    regex=r"[0-9a-zA-Z]{40,46}",
    severity=Severity.MEDIUM,
    category=PatternCategory.CLOUD,
    context=r"netlify",
    description="Netlify personal access token",
)

DOCKER_REGISTRY_TOKEN = Pattern(
    name="Docker Registry Token",
    regex=r"[a-zA-Z0-9]{12}:[a-zA-Z0-9]{8}-[a-zA-Z0-9]{4}-[a-zA-Z0-9]{4}-[a-zA-Z0-9]{4}-[a-zA-Z0-9]{12}",
    severity=Severity.HIGH,
    category=PatternCategory.CLOUD,
    context=r"docker",
    description="Docker registry credential",
)

CLOUD_PATTERNS = [
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_KEY,
    AWS_SESSION_TOKEN,
    AWS_MWS_TOKEN,
    GOOGLE_API_KEY,
    GOOGLE_OAUTH_CLIENT,
    GOOGLE_SERVICE_ACCOUNT,
    GCP_API_KEY,
    AZURE_STORAGE_KEY,
    AZURE_SAS_TOKEN,
    AZURE_SERVICE_PRINCIPAL,
    HEROKU_API_KEY,
    DIGITALOCEAN_TOKEN,
    NETLIFY_TOKEN,
    DOCKER_REGISTRY_TOKEN,
]

__all__ = [
    "CLOUD_PATTERNS",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_MWS_TOKEN",
    "GOOGLE_API_KEY",
    "GOOGLE_OAUTH_CLIENT",
    "GOOGLE_SERVICE_ACCOUNT",
    "GCP_API_KEY",
    "AZURE_STORAGE_KEY",
    "AZURE_SAS_TOKEN",
    "AZURE_SERVICE_PRINCIPAL",
    "HEROKU_API_KEY",
    "DIGITALOCEAN_TOKEN",
    "NETLIFY_TOKEN",
    "DOCKER_REGISTRY_TOKEN",
]
