"""
Session Router

Connected account and network status, plus the Farcaster mini-app
manifest served at ``/.well-known/farcaster.json``.
"""
from fastapi import APIRouter, Depends

from marketplace.config import Settings
from marketplace.errors import WalletNotInstalledError
from marketplace.logging import get_logger, sanitize_address_for_logging
from .deps import get_gateway, get_settings_dep
from .errors import SERVICE_ERRORS, to_http_exception

logger = get_logger(__name__)

router = APIRouter(tags=["session"])
manifest_router = APIRouter(tags=["manifest"])


@router.get("/session")
async def get_session(gateway=Depends(get_gateway), settings: Settings = Depends(get_settings_dep)):
    """
    Connected account, its network and seller registration.

    A missing wallet is reported as ``connected: false`` rather than an error
    so clients can render the "connect wallet" state.
    """
    session = {
        "connected": False,
        "account": None,
        "chain_id": None,
        "expected_chain_id": settings.chain_id,
        "chain_name": settings.chain_name,
        "currency": settings.currency_symbol,
        "network_ok": False,
        "is_seller": False,
        "contract_address": settings.contract_address,
    }
    try:
        account = await gateway.wallet.request_accounts()
    except WalletNotInstalledError:
        return session

    try:
        chain_id = await gateway.wallet.get_chain_id()
        session.update(
            connected=True,
            account=account,
            chain_id=chain_id,
            network_ok=chain_id == settings.chain_id,
        )
        if session["network_ok"]:
            session["is_seller"] = await gateway.is_registered_seller(account)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    logger.debug(f"Session for {sanitize_address_for_logging(account)} on chain {chain_id}")
    return session


@manifest_router.get("/.well-known/farcaster.json")
async def farcaster_manifest(settings: Settings = Depends(get_settings_dep)):
    """Mini-app manifest; account association values come from configuration."""
    app_url = settings.app_url.rstrip("/")
    return {
        "accountAssociation": {
            "header": settings.farcaster_header,
            "payload": settings.farcaster_payload,
            "signature": settings.farcaster_signature,
        },
        "frame": {
            "version": "1",
            "name": "Web3 Marketplace",
            "iconUrl": f"{app_url}/icon.png",
            "homeUrl": app_url,
            "imageUrl": f"{app_url}/image.png",
            "buttonTitle": "Open Marketplace",
            "splashImageUrl": f"{app_url}/splash.png",
            "splashBackgroundColor": "#eeccff",
            "webhookUrl": f"{app_url}/api/webhook",
        },
    }
