"""
Microsoft To Do resources of the Microsoft Graph API.

::

    lists = client.me.todo.lists
    work = await lists.add({'displayName': 'Work'})
    task = lists[work['id']].tasks[task_id]
    await task.update({'status': 'completed'})

"""
from . import fields
from .capabilities import GetById, Addable, Updateable, Deletable, DeltaEnabled
from .queryable import Collection, Instance
from .reference import SubResource
from .schema import FieldSet

IMPORTANCE = ('low', 'normal', 'high')

TASK_STATUS = ('notStarted', 'inProgress', 'completed', 'waitingOnOthers', 'deferred')

WELLKNOWN_LIST_NAMES = ('none', 'defaultList', 'flaggedEmails', 'unknownFutureValue')


class Todo(Instance):
    lists = SubResource('TaskLists')

    class Meta:
        default_path = 'todo'


class TaskList(Updateable, Deletable, Instance):
    tasks = SubResource('Tasks')

    class Schema:
        id = fields.String(io='r')
        displayName = fields.String(min_length=1)
        isOwner = fields.Boolean(io='r')
        isShared = fields.Boolean(io='r')
        wellknownListName = fields.String(enum=WELLKNOWN_LIST_NAMES, io='r')

    class Meta:
        required_fields = ('displayName',)


class TaskLists(GetById, Addable, DeltaEnabled, Collection):
    class Meta:
        default_path = 'lists'
        item = 'TaskList'


class Task(Updateable, Deletable, Instance):
    attachments = SubResource('Attachments')
    checklist_items = SubResource('ChecklistItems')
    resources = SubResource('LinkedResources')

    class Schema:
        id = fields.String(io='r')
        title = fields.String()
        body = fields.Object({
            'content': fields.String(),
            'contentType': fields.String(enum=('text', 'html'))
        })
        importance = fields.String(enum=IMPORTANCE)
        status = fields.String(enum=TASK_STATUS)
        categories = fields.Array(fields.String())
        isReminderOn = fields.Boolean()
        reminderDateTime = fields.DateTimeTimeZone(nullable=True)
        startDateTime = fields.DateTimeTimeZone(nullable=True)
        dueDateTime = fields.DateTimeTimeZone(nullable=True)
        completedDateTime = fields.DateTimeTimeZone(nullable=True)
        recurrence = fields.Object(nullable=True)
        hasAttachments = fields.Boolean(io='r')
        createdDateTime = fields.DateTimeString(io='r')
        lastModifiedDateTime = fields.DateTimeString(io='r')
        bodyLastModifiedDateTime = fields.DateTimeString(io='r')

    class Meta:
        required_fields = ('title',)


class Tasks(GetById, Addable, DeltaEnabled, Collection):
    class Meta:
        default_path = 'tasks'
        item = 'Task'


class Attachment(Deletable, Instance):

    class Schema:
        id = fields.String(io='r')
        name = fields.String(min_length=1)
        contentBytes = fields.String(io='c')
        contentType = fields.String()
        size = fields.Integer(io='r')
        lastModifiedDateTime = fields.DateTimeString(io='r')

    class Meta:
        required_fields = ('name', 'contentBytes')


class Attachments(GetById, Addable, Collection):
    """
    File attachments of a task. Files larger than 3 MB are uploaded through an upload session.
    """

    class Meta:
        default_path = 'attachments'
        item = 'Attachment'
        odata_type = '#microsoft.graph.taskFileAttachment'

    upload_session_schema = FieldSet({
        'attachmentType': fields.String(enum=('file',)),
        'name': fields.String(min_length=1),
        'size': fields.Integer(minimum=0)
    }, required_fields=('attachmentType', 'name', 'size'))

    def create_upload_session(self, attachment_info):
        """
        Creates an upload session for a large attachment.

        :param dict attachment_info: ``attachmentType``, ``name`` and ``size`` of the file
        :raises ValidationError: if ``name`` or ``size`` is missing
        :return: an awaitable resolving to the upload session, containing the ``uploadUrl``
        """
        info = dict(attachment_info)
        info.setdefault('attachmentType', 'file')
        info = self.upload_session_schema.convert(info)

        path = self.path.with_segment('createUploadSession')
        return self.submit(self.request('POST', body={'attachmentInfo': info}, path=path))


class ChecklistItem(Updateable, Deletable, Instance):

    class Schema:
        id = fields.String(io='r')
        displayName = fields.String(min_length=1)
        isChecked = fields.Boolean()
        checkedDateTime = fields.DateTimeString(io='r')
        createdDateTime = fields.DateTimeString(io='r')

    class Meta:
        required_fields = ('displayName',)


class ChecklistItems(GetById, Addable, Collection):
    class Meta:
        default_path = 'checklistItems'
        item = 'ChecklistItem'


class LinkedResource(Updateable, Deletable, Instance):

    class Schema:
        id = fields.String(io='r')
        webUrl = fields.String()
        applicationName = fields.String(min_length=1)
        displayName = fields.String()
        externalId = fields.String()

    class Meta:
        required_fields = ('applicationName', 'displayName')


class LinkedResources(GetById, Addable, Collection):
    class Meta:
        default_path = 'linkedResources'
        item = 'LinkedResource'
