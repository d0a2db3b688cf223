# rest.py
# -----------------------------------------------------------------------------
# Operator REST interface (served by ryu.app.wsgi, --wsapi-port).
#
#   GET    /sessions   ledger contents, one line per session (text/plain)
#   DELETE /sessions   clear the ledger; pairs are installed again on next packet
#   GET    /hosts      learnt hosts (mac, dpid, port)
#   GET    /topo       switches and directed links with their ports
# -----------------------------------------------------------------------------

import json

from ryu.app.wsgi import ControllerBase, route
from webob import Response

from reactive_path import config


def _json_bytes(payload):
    return json.dumps(payload, ensure_ascii=False).encode('utf-8')


def ok_json(payload, status=200):
    return Response(
        status=status,
        content_type='application/json; charset=utf-8',
        body=_json_bytes(payload)
    )


def bad_json(message, status=400):
    return ok_json({"ok": False, "error": str(message)}, status=status)


def ok_text(text, status=200):
    return Response(
        status=status,
        content_type='text/plain; charset=utf-8',
        body=text.encode('utf-8')
    )


class ReactivePathRest(ControllerBase):

    def __init__(self, req, link, data, **config_):
        super(ReactivePathRest, self).__init__(req, link, data, **config_)
        self.app = data[config.APP_INSTANCE_NAME]

    @route('reactivepath', '/sessions', methods=['GET'])
    def list_sessions(self, req, **kwargs):
        return ok_text(self.app.session_listing())

    @route('reactivepath', '/sessions', methods=['DELETE'])
    def reset_sessions(self, req, **kwargs):
        try:
            cleared = self.app.reset_sessions()
            return ok_json({"ok": True, "cleared": cleared})
        except Exception as e:
            return bad_json(e, status=400)

    @route('reactivepath', '/hosts', methods=['GET'])
    def get_hosts(self, req, **kwargs):
        table = self.app.hosts.as_list()
        return ok_json({"ok": True, "count": len(table), "hosts": table})

    @route('reactivepath', '/topo', methods=['GET'])
    def get_topo(self, req, **kwargs):
        return ok_json(self.app.topology.as_dict())
