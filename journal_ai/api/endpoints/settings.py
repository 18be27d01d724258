"""User settings endpoints"""

from fastapi import APIRouter, Depends
import logging

from journal_ai.api.deps import get_vault
from journal_ai.schemas.settings import JournalSettings
from journal_ai.services.vault import VaultManager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=JournalSettings)
async def get_settings(vault: VaultManager = Depends(get_vault)):
    """Load the vault's settings"""
    return vault.load_settings()


@router.post("/settings")
async def save_settings(journal_settings: JournalSettings, vault: VaultManager = Depends(get_vault)):
    """Replace the vault's settings"""
    vault.save_settings(journal_settings)
    logger.info(f"Settings saved to {vault.settings_path}")
    return {"success": True}
