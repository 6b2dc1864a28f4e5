"""FastAPI integration for open-cert-status."""

from typing import Optional
from uuid import UUID

from cryptography import x509
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..core.crypto import load_certificate
from ..core.errors import CertificateParseError
from ..core.models import ChainValidationResult, RevocationRecord
from ..core.names import identity_of
from ..responder.ocsp import OCSPService
from ..validator.chain import ChainValidator


class CertificateQuery(BaseModel):
    """Identifies a certificate by PEM body or by end-user subject."""

    certificate: Optional[str] = Field(default=None, description="PEM certificate")
    subject: Optional[str] = Field(
        default=None, description="Subject identity looked up in the end-user pool"
    )


class StateChangeRequest(CertificateQuery):
    """Revoke or reinstate request."""

    admin_id: UUID = Field(description="Admin performing the change")


class ValidateRequest(CertificateQuery):
    """Chain validation request."""

    at_time: Optional[str] = Field(
        default=None, description="Reference instant (default: now)"
    )


class StatusResponse(BaseModel):
    """Revocation status of one certificate."""

    serial_number: str
    status: str


def create_ocsp_router(
    service: OCSPService, validator: ChainValidator, prefix: str = "/ocsp"
) -> APIRouter:
    """Create a router exposing the OCSP service and chain validator.

    Args:
        service: OCSP service
        validator: Chain validator
        prefix: URL prefix (default "/ocsp")

    Returns:
        APIRouter to include in a FastAPI application
    """
    router = APIRouter(prefix=prefix, tags=["ocsp"])

    # Handlers do blocking file and lock I/O and must stay sync (threadpool).

    def resolve_certificate(query: CertificateQuery) -> x509.Certificate:
        if query.certificate:
            try:
                return load_certificate(query.certificate)
            except CertificateParseError as e:
                raise HTTPException(status_code=400, detail=str(e))

        if query.subject:
            certificate = service.locator.find_end_entity_certificate(query.subject)
            if certificate is None:
                raise HTTPException(
                    status_code=404, detail=f"Certificate not found: {query.subject}"
                )
            return certificate

        raise HTTPException(
            status_code=400, detail="Either certificate or subject is required"
        )

    def status_response(certificate: x509.Certificate, status) -> StatusResponse:
        return StatusResponse(
            serial_number=format(certificate.serial_number, "x"), status=status.value
        )

    @router.get("/records", response_model=list[RevocationRecord])
    def list_records():
        return service.get_all()

    @router.get("/records/{record_id}", response_model=RevocationRecord)
    def get_record(record_id: UUID):
        record = service.get_by_id(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Revocation record not found")
        return record

    @router.get("/serial/{serial}", response_model=RevocationRecord)
    def get_record_by_serial(serial: str):
        try:
            serial_number = int(serial, 16)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid serial number: {serial}")
        record = service.get_by_serial(serial_number)
        if record is None:
            raise HTTPException(status_code=404, detail="Revocation record not found")
        return record

    @router.get("/revokers/{admin_id}", response_model=list[RevocationRecord])
    def list_records_by_revoker(admin_id: UUID):
        return service.get_all_by_revoker(admin_id)

    @router.post("/check", response_model=StatusResponse)
    def check(query: CertificateQuery):
        certificate = resolve_certificate(query)
        issuer = service.locator.find_ca_certificate(identity_of(certificate.issuer))
        return status_response(certificate, service.check(certificate, issuer))

    @router.post("/revoke", response_model=StatusResponse)
    def revoke(request: StateChangeRequest):
        certificate = resolve_certificate(request)
        return status_response(certificate, service.revoke(certificate, request.admin_id))

    @router.post("/activate", response_model=StatusResponse)
    def activate(request: StateChangeRequest):
        certificate = resolve_certificate(request)
        return status_response(
            certificate, service.activate(certificate, request.admin_id)
        )

    @router.post("/validate", response_model=ChainValidationResult)
    def validate(request: ValidateRequest):
        certificate = resolve_certificate(request)
        return validator.validate(certificate, request.at_time)

    return router
