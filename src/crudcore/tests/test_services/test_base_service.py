import pytest

from crudcore.exceptions.base import BaseErrors, ErrorInfo, RepositoryError
from crudcore.models.entity import EntityMetadata, FindModelOptions
from crudcore.services.base_service import BaseService


@pytest.mark.asyncio
class TestServiceSuccess:
    """Non-empty repository results are returned as {data: result} without logging."""

    async def test_create(self, service, mock_repository, mock_logger, make_item, sample_item):
        item = make_item()

        result = await service.create(item)

        assert result == EntityMetadata(data=sample_item)
        mock_repository.create.assert_awaited_once_with(item)
        mock_logger.error.assert_not_called()

    async def test_update(self, service, mock_repository, mock_logger, sample_item):
        result = await service.update("id", {"name": "foobar"})

        assert result == EntityMetadata(data=sample_item)
        mock_repository.find_by_id.assert_awaited_once_with("id")
        mock_repository.update.assert_awaited_once_with("id", {"name": "foobar"})
        mock_logger.error.assert_not_called()

    async def test_delete(self, service, mock_repository, mock_logger):
        result = await service.delete("id")

        assert result == EntityMetadata(data=True)
        mock_repository.delete.assert_awaited_once_with("id")
        mock_logger.error.assert_not_called()

    async def test_get_all(self, service, sample_items):
        assert await service.get_all() == EntityMetadata(data=sample_items)

    async def test_find_by_id(self, service, mock_repository, sample_item):
        assert await service.find_by_id("id") == EntityMetadata(data=sample_item)
        mock_repository.find_by_id.assert_awaited_once_with("id")

    async def test_find_one(self, service, mock_repository, sample_item):
        assert await service.find_one({"name": "foobar"}) == EntityMetadata(data=sample_item)
        mock_repository.find_one.assert_awaited_once_with({"name": "foobar"})

    async def test_find_forwards_condition_and_options(self, service, mock_repository, sample_items):
        options = FindModelOptions(limit=10, skip=0)

        result = await service.find({"name": "foobar"}, options)

        assert result == EntityMetadata(data=sample_items)
        mock_repository.find.assert_awaited_once_with({"name": "foobar"}, options)


@pytest.mark.asyncio
class TestServiceEmptyResults:
    """None (or empty collections) become EMPTY_RESPONSE with status 400."""

    @pytest.mark.parametrize(
        "method, args",
        [
            ("create", ({"name": "x"},)),
            ("get_all", ()),
            ("find_by_id", ("id",)),
            ("find_one", ({"name": "x"},)),
            ("find", (None, None)),
        ],
    )
    async def test_none_result_is_empty_response(self, service, mock_repository, method, args):
        getattr(mock_repository, method).return_value = None

        result = await getattr(service, method)(*args)

        assert result.data is None
        assert result.error == ErrorInfo(BaseErrors.EMPTY_RESPONSE, None, 400)

    async def test_update_returning_none_is_empty_response(self, service, mock_repository):
        mock_repository.update.return_value = None

        result = await service.update("id", {"name": "x"})

        assert result.error.kind is BaseErrors.EMPTY_RESPONSE
        assert result.error.status_code == 400

    async def test_empty_list_is_empty_response(self, service, mock_repository):
        mock_repository.find.return_value = []

        result = await service.find({"name": "nobody"}, None)

        assert result.error.kind is BaseErrors.EMPTY_RESPONSE


@pytest.mark.asyncio
class TestServiceFailures:
    """Repository exceptions are logged exactly once and mapped to an operation-specific kind."""

    @pytest.mark.parametrize(
        "method, args, expected_kind",
        [
            ("create", ({"name": "x"},), BaseErrors.FAILED_TO_CREATE_RESOURCE),
            ("update", ("id", {"name": "x"}), BaseErrors.FAILED_TO_UPDATE_RESOURCE),
            ("delete", ("id",), BaseErrors.FAILED_TO_DELETE_RESOURCE),
        ],
    )
    async def test_mutation_errors(self, service, mock_repository, mock_logger, method, args, expected_kind):
        error = RuntimeError("boom")
        getattr(mock_repository, method).side_effect = error

        result = await getattr(service, method)(*args)

        assert result.data is None
        assert result.error.kind is expected_kind
        assert result.error.status_code == 400
        assert result.error.cause is error
        mock_logger.error.assert_called_once()

    @pytest.mark.parametrize(
        "method, args",
        [
            ("get_all", ()),
            ("find_by_id", ("id",)),
            ("find_one", ({"name": "x"},)),
            ("find", ({"name": "x"}, None)),
        ],
    )
    async def test_read_errors_are_unhandled(self, service, mock_repository, mock_logger, method, args):
        error = ConnectionError("store unavailable")
        getattr(mock_repository, method).side_effect = error

        result = await getattr(service, method)(*args)

        assert result.error == ErrorInfo(BaseErrors.UNHANDLED_ERROR, None, 400, error)
        mock_logger.error.assert_called_once()

    async def test_update_repository_error_maps_to_failed_update(self, service, mock_repository, mock_logger):
        """The repository's own 'no document returned' error travels up and is mapped by the service."""
        mock_repository.update.side_effect = RepositoryError("Failed to update entity id", entity_id="id")

        result = await service.update("id", {"name": "x"})

        assert result.error.kind is BaseErrors.FAILED_TO_UPDATE_RESOURCE
        assert isinstance(result.error.cause, RepositoryError)
        mock_logger.error.assert_called_once()

    async def test_logged_failure_carries_context(self, service, mock_repository, mock_logger):
        error = RuntimeError("boom")
        mock_repository.delete.side_effect = error

        await service.delete("abc")

        _, kwargs = mock_logger.error.call_args
        assert kwargs["exc_info"] is error
        assert kwargs["extra"]["operation"] == "delete"
        assert kwargs["extra"]["entity_id"] == "abc"


@pytest.mark.asyncio
class TestServiceExistenceChecks:

    @pytest.mark.parametrize("method, args", [("update", ("id", {"name": "x"})), ("delete", ("id",))])
    async def test_missing_entity_is_not_found(self, service, mock_repository, mock_logger, method, args):
        """
        Behavior:
            - find_by_id resolving to None short-circuits with NOT_FOUND (404).
            - The mutating repository method is never called.
        """
        mock_repository.find_by_id.return_value = None

        result = await getattr(service, method)(*args)

        assert result.error == ErrorInfo(BaseErrors.NOT_FOUND, None, 404)
        getattr(mock_repository, method).assert_not_awaited()
        mock_logger.error.assert_not_called()


@pytest.mark.asyncio
class TestServiceDeleteAcknowledgement:

    async def test_nothing_removed_is_failed_delete(self, service, mock_repository):
        mock_repository.delete.return_value = {"ok": 0, "n": 0}

        result = await service.delete("id")

        assert result.error.kind is BaseErrors.FAILED_TO_DELETE_RESOURCE
        assert result.error.cause is None

    async def test_acknowledged_but_zero_removed_is_failed_delete(self, service, mock_repository):
        mock_repository.delete.return_value = {"ok": 1, "n": 0}

        result = await service.delete("id")

        assert result.error.kind is BaseErrors.FAILED_TO_DELETE_RESOURCE

    async def test_one_removed_is_success(self, service, mock_repository):
        mock_repository.delete.return_value = {"ok": 1, "n": 1}

        assert await service.delete("id") == EntityMetadata(data=True)

    async def test_missing_acknowledgement_is_empty_response(self, service, mock_repository):
        mock_repository.delete.return_value = None

        result = await service.delete("id")

        assert result.error.kind is BaseErrors.EMPTY_RESPONSE


class TestEnvelopeHelpers:

    def test_error_takes_precedence(self, service):
        error = ErrorInfo(BaseErrors.UNHANDLED_ERROR, "bad", 500)

        assert service.convert_to_entity_metadata(error, {"name": "x"}) == EntityMetadata(error=error)

    @pytest.mark.parametrize("empty", [None, [], {}, ""])
    def test_empty_result_is_empty_response(self, service, empty):
        result = service.convert_to_entity_metadata(None, empty)

        assert result.error == ErrorInfo(BaseErrors.EMPTY_RESPONSE, None, 400)

    def test_result_becomes_data(self, service):
        assert service.convert_to_entity_metadata(None, [1]) == EntityMetadata(data=[1])

    def test_falsy_scalars_are_data(self, service):
        assert service.convert_to_entity_metadata(None, 0) == EntityMetadata(data=0)

    def test_success_helper(self):
        assert BaseService.get_success_entity_metadata("x") == EntityMetadata(data="x")

    def test_error_helper_defaults_to_400(self, service):
        result = service.get_error_entity_metadata(BaseErrors.INVALID_ARGUMENTS)

        assert result == EntityMetadata(error=ErrorInfo(BaseErrors.INVALID_ARGUMENTS, None, 400, None))

    def test_default_logger(self, mock_repository):
        svc = BaseService(mock_repository)

        assert svc.logger.name == "crudcore.services.base_service"
