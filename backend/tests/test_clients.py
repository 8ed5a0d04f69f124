"""Tests for the Jupiter and Solana RPC clients (httpx mock transport)."""

import base64
import json

import httpx
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.transaction import VersionedTransaction

from app.clients import (
    InvalidAmountError,
    JupiterApiError,
    JupiterClient,
    NetworkTimeoutError,
    PriorityLevel,
    QuoteResponse,
    RpcError,
    SerializationError,
    SigningError,
    SolanaRpcClient,
    load_keypair,
    sign_transaction,
)
from app.constants import MAX_COMPUTE_LAMPORTS, USDC_MINT, WSOL_MINT

QUOTE = {
    "inputMint": USDC_MINT,
    "outputMint": WSOL_MINT,
    "inAmount": "750000",
    "outAmount": "5000000",
    "otherAmountThreshold": "4975000",
    "slippageBps": 50,
    "routePlan": [{"swapInfo": {"label": "Whirlpool", "ammKey": "abc"}, "percent": 100}],
}


def unsigned_tx_b64(payer: Keypair) -> str:
    message = MessageV0.try_compile(payer.pubkey(), [], [], Hash.default())
    tx = VersionedTransaction(message, [payer])
    return base64.b64encode(bytes(tx)).decode("ascii")


# ── Jupiter ───────────────────────────────────────────────────────────────


class TestJupiterClient:
    @pytest.mark.asyncio
    async def test_get_usd_price(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={WSOL_MINT: {"usdPrice": 151.23, "decimals": 9}})

        client = JupiterClient(api_key="k", transport=httpx.MockTransport(handler))
        price = await client.get_usd_price()
        await client.close()

        assert price == 151.23
        assert requests[0].url.params["ids"] == WSOL_MINT
        assert requests[0].headers["x-api-key"] == "k"

    @pytest.mark.asyncio
    async def test_no_api_key_header_when_unset(self):
        seen = {}

        def handler(request):
            seen["headers"] = request.headers
            return httpx.Response(200, json={WSOL_MINT: {"usdPrice": 1}})

        client = JupiterClient(transport=httpx.MockTransport(handler))
        await client.get_usd_price()
        await client.close()

        assert "x-api-key" not in seen["headers"]

    @pytest.mark.asyncio
    async def test_missing_price_is_serialization_error(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={}))
        client = JupiterClient(transport=transport)

        with pytest.raises(SerializationError):
            await client.get_usd_price()

    @pytest.mark.asyncio
    async def test_http_error_maps_to_api_error(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(429, text="rate limited"))
        client = JupiterClient(transport=transport)

        with pytest.raises(JupiterApiError) as exc_info:
            await client.get_usd_price()
        assert exc_info.value.status_code == 429
        assert exc_info.value.body == "rate limited"

    @pytest.mark.asyncio
    async def test_timeout_maps_to_network_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        client = JupiterClient(transport=httpx.MockTransport(handler))
        with pytest.raises(NetworkTimeoutError):
            await client.get_usd_price()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, text="<html>"))
        client = JupiterClient(transport=transport)

        with pytest.raises(SerializationError):
            await client.get_usd_price()

    @pytest.mark.asyncio
    async def test_get_quote(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=QUOTE)

        client = JupiterClient(transport=httpx.MockTransport(handler))
        quote = await client.get_quote(USDC_MINT, WSOL_MINT, 750_000, 50)

        assert quote.in_amount == "750000"
        assert quote.out_amount == "5000000"
        assert quote.route_labels == ["Whirlpool"]
        assert requests[0].url.path == "/swap/v1/quote"
        params = requests[0].url.params
        assert params["inputMint"] == USDC_MINT
        assert params["outputMint"] == WSOL_MINT
        assert params["amount"] == "750000"
        assert params["slippageBps"] == "50"

    @pytest.mark.asyncio
    async def test_get_quote_rejects_zero_amount(self):
        client = JupiterClient(transport=httpx.MockTransport(lambda r: httpx.Response(500)))

        with pytest.raises(InvalidAmountError):
            await client.get_quote(USDC_MINT, WSOL_MINT, 0, 50)

    @pytest.mark.asyncio
    async def test_malformed_quote(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"foo": 1}))
        client = JupiterClient(transport=transport)

        with pytest.raises(SerializationError):
            await client.get_quote(USDC_MINT, WSOL_MINT, 1, 50)

    @pytest.mark.asyncio
    async def test_build_swap_tx(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"swapTransaction": "AAAA", "lastValidBlockHeight": 1})

        client = JupiterClient(transport=httpx.MockTransport(handler))
        quote = QuoteResponse.model_validate(QUOTE)

        tx = await client.build_swap_tx(quote, "WalletPubkey", PriorityLevel.HIGH)

        assert tx == "AAAA"
        body = bodies[0]
        assert body["userPublicKey"] == "WalletPubkey"
        assert body["dynamicComputeUnitLimit"] is True
        assert body["dynamicSlippage"] is True
        fee = body["prioritizationFeeLamports"]["priorityLevelWithMaxLamports"]
        assert fee == {"maxLamports": MAX_COMPUTE_LAMPORTS, "priorityLevel": "high"}
        # Quote echoed back with its original field names, extras included
        assert body["quoteResponse"]["inAmount"] == "750000"
        assert body["quoteResponse"]["otherAmountThreshold"] == "4975000"
        assert body["quoteResponse"]["routePlan"][0]["swapInfo"]["label"] == "Whirlpool"


class TestQuoteResponse:
    def test_age_ms(self):
        quote = QuoteResponse.model_validate(QUOTE)
        quote._fetched_at = 100.0

        assert quote.age_ms(now=101.5) == pytest.approx(1500.0)

    def test_payload_not_stamped(self):
        quote = QuoteResponse.model_validate(QUOTE)
        assert "_fetched_at" not in quote.to_payload()


# ── Signing ───────────────────────────────────────────────────────────────


class TestSigning:
    def test_load_keypair(self):
        kp = Keypair()
        loaded = load_keypair(str(kp))
        assert loaded.pubkey() == kp.pubkey()

    def test_load_keypair_missing(self):
        with pytest.raises(SigningError):
            load_keypair("")

    def test_sign_transaction(self):
        kp = Keypair()
        signed = sign_transaction(unsigned_tx_b64(kp), kp)

        expected = VersionedTransaction(signed.message, [kp])
        assert signed.signatures[0] == expected.signatures[0]
        assert signed.message.account_keys[0] == kp.pubkey()

    def test_sign_transaction_invalid_base64(self):
        with pytest.raises(SerializationError):
            sign_transaction("%%% not base64 %%%", Keypair())

    def test_sign_transaction_invalid_bytes(self):
        garbage = base64.b64encode(b"\x01\x02\x03").decode()
        with pytest.raises(SerializationError):
            sign_transaction(garbage, Keypair())

    def test_sign_with_wrong_key(self):
        payer = Keypair()
        with pytest.raises(SigningError):
            sign_transaction(unsigned_tx_b64(payer), Keypair())


# ── Solana RPC ────────────────────────────────────────────────────────────


def rpc_transport(responses: dict[str, list]) -> tuple[httpx.MockTransport, list[dict]]:
    """Mock RPC answering each method with its queued results in order."""
    calls: list[dict] = []

    def handler(request):
        payload = json.loads(request.content)
        calls.append(payload)
        queue = responses[payload["method"]]
        body = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], **body})

    return httpx.MockTransport(handler), calls


def status(confirmation: str | None = None, err=None) -> dict:
    value = None
    if confirmation is not None or err is not None:
        value = {"confirmationStatus": confirmation, "err": err}
    return {"result": {"context": {"slot": 1}, "value": [value]}}


class TestSolanaRpcClient:
    @pytest.mark.asyncio
    async def test_send_transaction(self):
        kp = Keypair()
        transport, calls = rpc_transport({"sendTransaction": [{"result": "sig123"}]})
        client = SolanaRpcClient("http://rpc", transport=transport)

        tx = sign_transaction(unsigned_tx_b64(kp), kp)
        signature = await client.send_transaction(tx)
        await client.close()

        assert signature == "sig123"
        params = calls[0]["params"]
        assert base64.b64decode(params[0]) == bytes(tx)
        assert params[1] == {"encoding": "base64", "preflightCommitment": "confirmed"}

    @pytest.mark.asyncio
    async def test_rpc_error_field(self):
        transport, _ = rpc_transport(
            {"sendTransaction": [{"error": {"code": -32002, "message": "preflight failed"}}]}
        )
        client = SolanaRpcClient("http://rpc", transport=transport)
        kp = Keypair()

        with pytest.raises(RpcError, match="preflight failed"):
            await client.send_transaction(sign_transaction(unsigned_tx_b64(kp), kp))

    @pytest.mark.asyncio
    async def test_http_error(self):
        client = SolanaRpcClient(
            "http://rpc", transport=httpx.MockTransport(lambda r: httpx.Response(503, text="down"))
        )
        with pytest.raises(RpcError):
            await client.confirm_transaction("sig")

    @pytest.mark.asyncio
    async def test_confirm_polls_until_confirmed(self):
        transport, calls = rpc_transport(
            {"getSignatureStatuses": [status(), status("processed"), status("confirmed")]}
        )
        client = SolanaRpcClient("http://rpc", poll_interval=0, transport=transport)

        await client.confirm_transaction("sig")

        assert len(calls) == 3
        assert calls[0]["params"][0] == ["sig"]

    @pytest.mark.asyncio
    async def test_confirm_failed_transaction(self):
        transport, _ = rpc_transport(
            {"getSignatureStatuses": [status("confirmed", err={"InstructionError": [0, "x"]})]}
        )
        client = SolanaRpcClient("http://rpc", poll_interval=0, transport=transport)

        with pytest.raises(RpcError):
            await client.confirm_transaction("sig")

    @pytest.mark.asyncio
    async def test_confirm_timeout(self):
        transport, _ = rpc_transport({"getSignatureStatuses": [status()]})
        client = SolanaRpcClient(
            "http://rpc", confirm_timeout=0, poll_interval=0, transport=transport
        )

        with pytest.raises(NetworkTimeoutError):
            await client.confirm_transaction("sig")

    @pytest.mark.asyncio
    async def test_sign_and_send(self):
        kp = Keypair()
        transport, calls = rpc_transport(
            {
                "sendTransaction": [{"result": "sig-ok"}],
                "getSignatureStatuses": [status("finalized")],
            }
        )
        client = SolanaRpcClient("http://rpc", poll_interval=0, transport=transport)

        signature = await client.sign_and_send(unsigned_tx_b64(kp), kp)

        assert signature == "sig-ok"
        assert [c["method"] for c in calls] == ["sendTransaction", "getSignatureStatuses"]
