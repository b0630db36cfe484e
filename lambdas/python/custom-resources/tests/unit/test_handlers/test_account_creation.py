from unittest.mock import MagicMock, patch

from tests import TstLambdas


class TestAccountCreation(TstLambdas):
    def setUp(self):
        self.mock_config = MagicMock(name='config')
        patcher = patch('handlers.account_creation.config', self.mock_config)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.organizations_client = self.mock_config.organizations_client

    def _when_status_is(self, state: str, **status):
        self.organizations_client.describe_create_account_status.return_value = {
            'CreateAccountStatus': {'Id': 'car-123', 'State': state, 'AccountName': 'Account1', **status}
        }

    def test_create_passes_only_provided_tags(self):
        from handlers.account_creation import on_event

        self.organizations_client.create_account.return_value = {'CreateAccountStatus': {'Id': 'car-123'}}

        resp = on_event(
            {
                'RequestType': 'Create',
                'ResourceProperties': {
                    'Email': 'admin+Account1@example.com',
                    'AccountName': 'Account1',
                    'AccountType': 'PLAYGROUND',
                },
            },
            self.mock_context,
        )

        self.assertEqual({'PhysicalResourceId': 'car-123'}, resp)
        self.organizations_client.create_account.assert_called_once_with(
            Email='admin+Account1@example.com',
            AccountName='Account1',
            Tags=[{'Key': 'AccountType', 'Value': 'PLAYGROUND'}],
        )

    def test_is_complete_false_while_in_progress(self):
        from handlers.account_creation import is_complete

        self._when_status_is('IN_PROGRESS')

        resp = is_complete({'RequestType': 'Create', 'PhysicalResourceId': 'car-123'}, self.mock_context)

        self.assertEqual({'IsComplete': False}, resp)

    def test_is_complete_returns_account_id_on_success(self):
        from handlers.account_creation import is_complete

        self._when_status_is('SUCCEEDED', AccountId='123456789012')

        resp = is_complete({'RequestType': 'Create', 'PhysicalResourceId': 'car-123'}, self.mock_context)

        self.assertEqual({'IsComplete': True, 'Data': {'AccountId': '123456789012'}}, resp)

    def test_is_complete_raises_on_failed_creation(self):
        from exceptions import AccountCreationException
        from handlers.account_creation import is_complete

        self._when_status_is('FAILED', FailureReason='EMAIL_ALREADY_EXISTS')

        with self.assertRaises(AccountCreationException) as context:
            is_complete({'RequestType': 'Create', 'PhysicalResourceId': 'car-123'}, self.mock_context)

        self.assertIn('EMAIL_ALREADY_EXISTS', context.exception.message)

    def test_update_raises_if_account_is_not_in_organization(self):
        from exceptions import AccountCreationException
        from handlers.account_creation import on_event

        self.organizations_client.get_paginator.return_value.paginate.return_value = [
            {'Accounts': [{'Id': '000000000000', 'Email': 'someone-else@example.com'}]}
        ]
        properties = {'Email': 'admin+Account1@example.com', 'AccountName': 'Account1'}

        with self.assertRaises(AccountCreationException):
            on_event(
                {
                    'RequestType': 'Update',
                    'PhysicalResourceId': 'car-123',
                    'ResourceProperties': properties,
                    'OldResourceProperties': properties,
                },
                self.mock_context,
            )

    def test_update_without_tags_does_not_tag(self):
        from handlers.account_creation import on_event

        self.organizations_client.get_paginator.return_value.paginate.return_value = [
            {'Accounts': [{'Id': '123456789012', 'Email': 'Admin+Account1@example.com'}]}
        ]
        properties = {'Email': 'admin+Account1@example.com', 'AccountName': 'Account1'}

        resp = on_event(
            {
                'RequestType': 'Update',
                'PhysicalResourceId': 'car-123',
                'ResourceProperties': properties,
                'OldResourceProperties': properties,
            },
            self.mock_context,
        )

        self.assertEqual({'PhysicalResourceId': 'car-123', 'Data': {'AccountId': '123456789012'}}, resp)
        self.organizations_client.tag_resource.assert_not_called()

    def test_delete_makes_no_calls(self):
        from handlers.account_creation import is_complete, on_event

        event = {
            'RequestType': 'Delete',
            'PhysicalResourceId': 'car-123',
            'ResourceProperties': {'Email': 'admin+Account1@example.com', 'AccountName': 'Account1'},
        }

        self.assertIsNone(on_event(event, self.mock_context))
        self.assertEqual({'IsComplete': True}, is_complete(event, self.mock_context))
        self.organizations_client.assert_not_called()
        self.assertEqual([], self.organizations_client.method_calls)

    def test_unknown_request_type_raises(self):
        from handlers.account_creation import on_event

        with self.assertRaises(ValueError):
            on_event(
                {'RequestType': 'Replace', 'ResourceProperties': {'AccountName': 'Account1'}},
                self.mock_context,
            )
