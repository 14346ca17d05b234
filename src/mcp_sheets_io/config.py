"""Environment-driven settings for the Sheets I/O server."""

import os

SCOPES = ['https://www.googleapis.com/auth/spreadsheets', 'https://www.googleapis.com/auth/drive']

# Auth
CREDENTIALS_CONFIG = os.environ.get('CREDENTIALS_CONFIG')
TOKEN_PATH = os.environ.get('TOKEN_PATH', 'token.json')
CREDENTIALS_PATH = os.environ.get('CREDENTIALS_PATH', 'credentials.json')
SERVICE_ACCOUNT_PATH = os.environ.get('SERVICE_ACCOUNT_PATH', 'service_account.json')

# Restricts spreadsheet search to a single Drive folder when set
DRIVE_FOLDER_ID = os.environ.get('DRIVE_FOLDER_ID', '')

# Server
HOST = os.environ.get('HOST') or os.environ.get('FASTMCP_HOST') or "0.0.0.0"
PORT = int(os.environ.get('PORT') or os.environ.get('FASTMCP_PORT') or "8000")

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.environ.get('LOG_FILE') or None

SPREADSHEET_MIME_TYPE = 'application/vnd.google-apps.spreadsheet'
