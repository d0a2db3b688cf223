# topo.py
# Mininet topologies for exercising the reactive path controller.
#
#   twohop: h1-s1, h3-s1, h2-s2; switch links s1-s3, s3-s2
#           (h1->h2 crosses three switches, h1->h3 stays on s1)
#   ring:   n switches in a ring, one host each (two candidate paths per pair)
#
# sudo mn --custom reactive_path/topo.py --topo twohop \
#         --controller=remote,ip=127.0.0.1,port=6633 \
#         --switch ovsk,protocols=OpenFlow13 --mac

from mininet.topo import Topo


class TwoHopTopo(Topo):
    def build(self):
        s1 = self.addSwitch('s1', protocols='OpenFlow13')
        s2 = self.addSwitch('s2', protocols='OpenFlow13')
        s3 = self.addSwitch('s3', protocols='OpenFlow13')

        h1 = self.addHost('h1')
        h2 = self.addHost('h2')
        h3 = self.addHost('h3')

        # host links first so h1 is s1-eth1 and h2 is s2-eth1
        self.addLink(h1, s1)
        self.addLink(h2, s2)
        self.addLink(h3, s1)

        self.addLink(s1, s3)
        self.addLink(s3, s2)


class RingTopo(Topo):
    def build(self, n=4):
        switches = [self.addSwitch('s%d' % i, protocols='OpenFlow13')
                    for i in range(1, n + 1)]
        for i, sw in enumerate(switches, start=1):
            self.addLink(self.addHost('h%d' % i), sw)
        for i, sw in enumerate(switches):
            self.addLink(sw, switches[(i + 1) % n])


topos = {
    'twohop': TwoHopTopo,
    'ring': RingTopo,
}
