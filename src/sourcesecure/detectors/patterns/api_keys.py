"""API key detection patterns.

This module contains patterns for service-specific API keys and tokens:
source hosting, payments, messaging, AI services, chat and social
platforms and package registries.
"""

from sourcesecure.core.models import Severity
from sourcesecure.detectors.patterns import Pattern, PatternCategory

# GitHub
GITHUB_PAT = Pattern(
    name="GitHub Personal Access Token",
    regex=r"ghp_[0-9a-zA-Z]{36}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="GitHub classic personal access token",
)

GITHUB_OAUTH = Pattern(
    name="GitHub OAuth Access Token",
    regex=r"gho_[0-9a-zA-Z]{36}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="GitHub OAuth access token",
)

GITHUB_APP_TOKEN = Pattern(
    name="GitHub App Token",
    regex=r"ghs_[0-9a-zA-Z]{36}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="GitHub App installation token",
)

GITHUB_REFRESH_TOKEN = Pattern(
    name="GitHub Refresh Token",
    regex=r"ghr_[0-9a-zA-Z]{36}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="GitHub refresh token",
)

GITHUB_FINE_GRAINED_PAT = Pattern(
    name="GitHub Fine-grained PAT",
    regex=r"github_pat_[0-9a-zA-Z_]{82}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="GitHub fine-grained personal access token",
)

# Payments
STRIPE_API_KEY = Pattern(
    name="Stripe API Key",
    regex=r"(?:r|s)k_(?:test|live)_[0-9a-zA-Z]{24}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="Stripe secret or restricted key",
)

STRIPE_WEBHOOK_SECRET = Pattern(
    name="Stripe Webhook Secret",
    regex=r"whsec_[0-9a-zA-Z]{32,}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Stripe webhook signing secret",
)

PAYPAL_BRAINTREE_TOKEN = Pattern(
    name="PayPal/Braintree Token",
    regex=r"(?i)access_token\$(?:production|sandbox)\$[0-9a-z]{16}\$[0-9a-f]{32}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="PayPal Braintree access token",
)

SQUARE_ACCESS_TOKEN = Pattern(
    name="Square Access Token",
    regex=r"sq0a[tp]p-[0-9A-Za-z_-]{22}",
    severity=Severity.CRITICAL,
    category=PatternCategory.API_KEYS,
    description="Square access token",
)

# Messaging and email
TWILIO_API_KEY = Pattern(
    name="Twilio API Key",
    regex=r"SK[0-9a-fA-F]{32}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Twilio API key",
)

SENDGRID_API_KEY = Pattern(
    name="SendGrid API Key",
    regex=r"SG\.[0-9A-Za-z_-]{22}\.[0-9A-Za-z_-]{43}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="SendGrid API key",
)

MAILGUN_API_KEY = Pattern(
    name="Mailgun API Key",
    regex=r"key-[0-9a-zA-Z]{32}",
    severity=Severity.MEDIUM,
    category=PatternCategory.API_KEYS,
    description="Mailgun API key",
)

MAILCHIMP_API_KEY = Pattern(
    name="Mailchimp API Key",
    regex=r"[0-9a-f]{32}-us[0-9]{1,2}",
    severity=Severity.MEDIUM,
    category=PatternCategory.API_KEYS,
    description="Mailchimp API key with datacenter suffix",
)

# AI services
OPENAI_API_KEY = Pattern(
    name="OpenAI API Key",
    regex=r"sk-(?:proj-)?[0-9a-zA-Z]{48}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="OpenAI API key",
)

ANTHROPIC_API_KEY = Pattern(
    name="Anthropic API Key",
    regex=r"sk-ant-(?:api|sid)[0-9]{2}-[0-9a-zA-Z_-]{84}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Anthropic API key",
)

HUGGING_FACE_TOKEN = Pattern(
    name="Hugging Face Token",
    regex=r"hf_[0-9a-zA-Z]{34}",
    severity=Severity.MEDIUM,
    category=PatternCategory.API_KEYS,
    description="Hugging Face access token",
)

# Chat and social
SLACK_TOKEN = Pattern(
    name="Slack Token",
    regex=r"xox[baprs]-[0-9]{10,13}-[0-9]{10,13}-[0-9a-zA-Z]{24,34}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Slack bot, user or app token",
)

SLACK_WEBHOOK = Pattern(
    name="Slack Webhook",
    regex=r"(?i)https://hooks\.slack\.com/services/T[0-9A-Z]{8}/B[0-9A-Z]{8}/[0-9a-zA-Z]{24}",
    severity=Severity.MEDIUM,
    category=PatternCategory.API_KEYS,
    description="Slack incoming webhook URL",
)

FACEBOOK_ACCESS_TOKEN = Pattern(
    name="Facebook Access Token",
    regex=r"EAA[0-9A-Za-z]{20,}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Facebook Graph API access token",
)

TWITTER_BEARER_TOKEN = Pattern(
    name="Twitter Bearer Token",
    regex=r"A{22}[0-9A-Za-z%]{20,}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Twitter app-only bearer token",
)

DISCORD_BOT_TOKEN = Pattern(
    name="Discord Bot Token",
    regex=r"[MN][A-Za-z0-9]{23}\.[A-Za-z0-9_-]{6}\.[A-Za-z0-9_-]{27}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="Discord bot token",
)

DISCORD_WEBHOOK = Pattern(
    name="Discord Webhook",
    regex=r"(?i)https://discord(?:app)?\.com/api/webhooks/[0-9]{17,19}/[A-Za-z0-9_-]{68}",
    severity=Severity.MEDIUM,
    category=PatternCategory.API_KEYS,
    description="Discord webhook URL",
)

# Package registries
NPM_TOKEN = Pattern(
    name="NPM Token",
    regex=r"npm_[0-9a-zA-Z]{36}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="npm access token",
)

PYPI_TOKEN = Pattern(
    name="PyPI Token",
    regex=r"pypi-[0-9a-zA-Z_-]{40,}",
    severity=Severity.HIGH,
    category=PatternCategory.API_KEYS,
    description="PyPI upload token",
)

API_KEY_PATTERNS = [
    GITHUB_PAT,
    GITHUB_OAUTH,
    GITHUB_APP_TOKEN,
    GITHUB_REFRESH_TOKEN,
    GITHUB_FINE_GRAINED_PAT,
    STRIPE_API_KEY,
    STRIPE_WEBHOOK_SECRET,
    PAYPAL_BRAINTREE_TOKEN,
    SQUARE_ACCESS_TOKEN,
    TWILIO_API_KEY,
    SENDGRID_API_KEY,
    MAILGUN_API_KEY,
    MAILCHIMP_API_KEY,
    OPENAI_API_KEY,
    ANTHROPIC_API_KEY,
    HUGGING_FACE_TOKEN,
    SLACK_TOKEN,
    SLACK_WEBHOOK,
    FACEBOOK_ACCESS_TOKEN,
    TWITTER_BEARER_TOKEN,
    DISCORD_BOT_TOKEN,
    DISCORD_WEBHOOK,
    NPM_TOKEN,
    PYPI_TOKEN,
]

__all__ = [
    "API_KEY_PATTERNS",
    "GITHUB_PAT",
    "GITHUB_OAUTH",
    "GITHUB_APP_TOKEN",
    "GITHUB_REFRESH_TOKEN",
    "GITHUB_FINE_GRAINED_PAT",
    "STRIPE_API_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "PAYPAL_BRAINTREE_TOKEN",
    "SQUARE_ACCESS_TOKEN",
    "TWILIO_API_KEY",
    "SENDGRID_API_KEY",
    "MAILGUN_API_KEY",
    "MAILCHIMP_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "HUGGING_FACE_TOKEN",
    "SLACK_TOKEN",
    "SLACK_WEBHOOK",
    "FACEBOOK_ACCESS_TOKEN",
    "TWITTER_BEARER_TOKEN",
    "DISCORD_BOT_TOKEN",
    "DISCORD_WEBHOOK",
    "NPM_TOKEN",
    "PYPI_TOKEN",
]
