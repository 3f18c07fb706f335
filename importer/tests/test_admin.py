from unittest import mock

from django.contrib import messages
from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory, TestCase

from importer.admin import BggGameAssociationAdmin, refresh_from_bgg
from importer.models import BggGameAssociation

from .utils import create_association


@mock.patch("importer.admin.import_bgg_games_task.delay", autospec=True)
@mock.patch("importer.admin.messages.add_message", autospec=True)
class ActionTests(TestCase):
    def test_refresh_from_bgg(self, messages_mock, task_mock):
        bgg_ids = [13, 822, 9209]
        for bgg_id in bgg_ids:
            create_association(bgg_id=bgg_id, name=f"Game {bgg_id}")
        modeladmin_mock = mock.MagicMock()
        request = RequestFactory().get("/")

        refresh_from_bgg(modeladmin_mock, request, BggGameAssociation.objects.all())

        self.assertEqual(task_mock.call_count, 1)
        self.assertEqual(sorted(task_mock.call_args.args[0]), bgg_ids)
        self.assertEqual(messages_mock.call_count, 1)
        self.assertEqual(
            messages_mock.call_args.args,
            (request, messages.INFO, "Queued refresh of 3 games"),
        )


class BggGameAssociationAdminTests(TestCase):
    def test_registered_actions(self):
        model_admin = BggGameAssociationAdmin(BggGameAssociation, AdminSite())
        self.assertIn(refresh_from_bgg, model_admin.actions)
