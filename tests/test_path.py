from unittest import TestCase

from potion_client.exceptions import InvalidPathError
from potion_client.path import Path, Segment


class PathTestCase(TestCase):

    def test_parse(self):
        path = Path.parse('/me/todo/')
        self.assertEqual((Segment('me'), Segment('todo')), path.segments)
        self.assertEqual('me/todo', path.to_request_path())
        self.assertEqual(2, len(path))
        self.assertEqual("Path('me/todo')", repr(path))

    def test_render_idempotent(self):
        path = Path.parse('me/todo').with_segment('lists').with_id('AAMk').with_segment('tasks')
        self.assertEqual('me/todo/lists/AAMk/tasks', path.to_request_path())
        self.assertEqual(path.to_request_path(), path.to_request_path())
        self.assertEqual('me/todo/lists/AAMk/tasks', str(path))

    def test_empty_path(self):
        path = Path()
        self.assertEqual('', path.to_request_path())
        self.assertEqual(0, len(path))
        self.assertIsNone(path.selector)
        self.assertFalse(path.is_item)

    def test_derive_keeps_parent(self):
        lists = Path.parse('me/todo/lists')
        item = lists.with_id('AAMk')
        child = item.with_segment('tasks')

        self.assertEqual('me/todo/lists', lists.to_request_path())
        self.assertEqual('me/todo/lists/AAMk', item.to_request_path())
        self.assertEqual('me/todo/lists/AAMk/tasks', child.to_request_path())
        self.assertFalse(lists.is_item)
        self.assertTrue(item.is_item)
        self.assertEqual('AAMk', item.selector)
        self.assertFalse(child.is_item)

    def test_immutable(self):
        path = Path.parse('me')
        with self.assertRaises(AttributeError):
            path._segments = ()
        with self.assertRaises(AttributeError):
            path.foo = 'bar'

    def test_equality(self):
        self.assertEqual(Path.parse('me/todo'), Path().with_segment('me').with_segment('todo'))
        self.assertEqual(hash(Path.parse('me/todo')), hash(Path.parse('me/todo')))
        self.assertNotEqual(Path.parse('me/todo'), Path.parse('me/todo', id_style='parentheses'))
        self.assertNotEqual(Path.parse('tasks').with_id(1), Path.parse('tasks'))
        self.assertNotEqual(Path.parse('me'), 'me')

    def test_segment_id_style(self):
        tasks = Path.parse('tasks')
        self.assertEqual('tasks/42', tasks.with_id(42).to_request_path())
        self.assertEqual('tasks/AAMk%3D', tasks.with_id('AAMk=').to_request_path())
        self.assertEqual('tasks/a%2Fb', tasks.with_id('a/b').to_request_path())

    def test_parentheses_id_style(self):
        users = Path.parse('users', id_style='parentheses')
        self.assertEqual('users(42)', users.with_id(42).to_request_path())
        self.assertEqual("users('abc')", users.with_id('abc').to_request_path())
        self.assertEqual("users('o''neil')", users.with_id("o'neil").to_request_path())
        self.assertEqual("users('abc')/todo", users.with_id('abc').with_segment('todo').to_request_path())

    def test_unknown_id_style(self):
        with self.assertRaises(InvalidPathError):
            Path(id_style='brackets')

    def test_invalid_segments(self):
        path = Path.parse('me')
        for name in ('', None, 42, '.', '..', 'a/b', 'a b', 'a?b', 'a#b', '50%'):
            with self.assertRaises(InvalidPathError, msg=repr(name)):
                path.with_segment(name)

    def test_select_on_empty_path(self):
        with self.assertRaises(InvalidPathError):
            Path().with_id('AAMk')

    def test_invalid_ids(self):
        path = Path.parse('tasks')
        for id in ('', '   ', None):
            with self.assertRaises(InvalidPathError, msg=repr(id)):
                path.with_id(id)

    def test_double_selection(self):
        item = Path.parse('tasks').with_id('AAMk')
        with self.assertRaises(InvalidPathError) as cx:
            item.with_id('AAMl')

        self.assertEqual('"tasks" already has the id selector \'AAMk\'', cx.exception.message)
        self.assertEqual('tasks/AAMk', item.to_request_path())

    def test_query(self):
        path = Path.parse('tasks').with_query([('$select', 'title,status')], **{'$top': 10})
        self.assertEqual((('$select', 'title,status'), ('$top', 10)), path.query)
        self.assertEqual('tasks?$select=title,status&$top=10', path.to_request_path())

    def test_query_replaces_value_in_place(self):
        path = Path.parse('tasks').with_query(a='1').with_query(b='2').with_query({'a': '3'})
        self.assertEqual('tasks?a=3&b=2', path.to_request_path())

    def test_query_quoting(self):
        path = Path.parse('tasks').with_query([('$filter', "status eq 'completed'")])
        self.assertEqual("tasks?$filter=status%20eq%20'completed'", path.to_request_path())

    def test_query_not_carried_to_child(self):
        path = Path.parse('tasks').with_query(a='1').with_segment('delta')
        self.assertEqual((), path.query)
        self.assertEqual('tasks/delta', path.to_request_path())

    def test_query_kept_on_selection(self):
        path = Path.parse('tasks').with_query(a='1').with_id('AAMk')
        self.assertEqual('tasks/AAMk?a=1', path.to_request_path())
