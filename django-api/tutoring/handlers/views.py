"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from functools import wraps

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from tutoring.domain.errors import DomainError, ErrorCode
from tutoring.handlers.serializers import (
    ContractInputSerializer,
    ContractSerializer,
    LessonInputSerializer,
    LessonSerializer,
    StudentInputSerializer,
    StudentSerializer,
    StudentSummarySerializer,
)
from tutoring.services import StudentService
from tutoring.stores.factory import build_student_store

ERROR_STATUS = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.STUDENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.LESSON_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONTRACT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def maps_domain_errors(handler):
    """Turn domain errors raised by a handler into error responses."""

    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except DomainError as error:
            return error_response(error)

    return wrapper


class StudentAPIView(APIView):
    """Base view wiring the configured store into a StudentService."""

    def get_service(self) -> StudentService:
        return StudentService(build_student_store())

    def validated(self, serializer_class, request: Request, partial: bool = False) -> dict:
        serializer = serializer_class(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class StudentListView(StudentAPIView):
    """Handler for GET/POST /api/students"""

    def get(self, request: Request) -> Response:
        summaries = self.get_service().list_students()
        return Response(StudentSummarySerializer(summaries, many=True).data)

    def post(self, request: Request) -> Response:
        data = self.validated(StudentInputSerializer, request)
        student = self.get_service().create_student(data)
        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


class StudentDetailView(StudentAPIView):
    """Handler for GET/PATCH/DELETE /api/students/{student_id}"""

    @maps_domain_errors
    def get(self, request: Request, student_id: str) -> Response:
        student = self.get_service().get_student(student_id)
        return Response(StudentSerializer(student).data)

    @maps_domain_errors
    def patch(self, request: Request, student_id: str) -> Response:
        patch = self.validated(StudentInputSerializer, request, partial=True)
        student = self.get_service().update_student(student_id, patch)
        return Response(StudentSerializer(student).data)

    @maps_domain_errors
    def delete(self, request: Request, student_id: str) -> Response:
        self.get_service().delete_student(student_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LessonListView(StudentAPIView):
    """Handler for POST /api/students/{student_id}/lessons"""

    @maps_domain_errors
    def post(self, request: Request, student_id: str) -> Response:
        data = self.validated(LessonInputSerializer, request)
        student = self.get_service().add_lesson(student_id, data)
        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


class LessonDetailView(StudentAPIView):
    """Handler for PATCH/DELETE /api/students/{student_id}/lessons/{lesson_id}"""

    @maps_domain_errors
    def patch(self, request: Request, student_id: str, lesson_id: str) -> Response:
        patch = self.validated(LessonInputSerializer, request, partial=True)
        lesson = self.get_service().update_lesson(student_id, lesson_id, patch)
        return Response(LessonSerializer(lesson).data)

    @maps_domain_errors
    def delete(self, request: Request, student_id: str, lesson_id: str) -> Response:
        self.get_service().delete_lesson(student_id, lesson_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ContractListView(StudentAPIView):
    """Handler for POST /api/students/{student_id}/contracts"""

    @maps_domain_errors
    def post(self, request: Request, student_id: str) -> Response:
        data = self.validated(ContractInputSerializer, request)
        contract = self.get_service().add_contract(student_id, data)
        return Response(ContractSerializer(contract).data, status=status.HTTP_201_CREATED)


class ContractDetailView(StudentAPIView):
    """Handler for PATCH/DELETE /api/students/{student_id}/contracts/{contract_id}"""

    @maps_domain_errors
    def patch(self, request: Request, student_id: str, contract_id: str) -> Response:
        patch = self.validated(ContractInputSerializer, request, partial=True)
        contract = self.get_service().update_contract(student_id, contract_id, patch)
        return Response(ContractSerializer(contract).data)

    @maps_domain_errors
    def delete(self, request: Request, student_id: str, contract_id: str) -> Response:
        self.get_service().delete_contract(student_id, contract_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
